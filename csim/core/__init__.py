"""Core package shim.

Exposes the main core classes at `csim.core` so callers can write
`from csim.core import CacheSimulator`.
"""
from .cache import Cache, CacheGeometry, CacheLine, ConfigurationError
from .simulator import AccessOutcome, CacheSimulator

__all__ = ["Cache", "CacheGeometry", "CacheLine", "ConfigurationError", "AccessOutcome", "CacheSimulator"]
