"""Replacement policy implementations for the cache simulator.

Both policies share a small API so the simulator can call them
interchangeably without re-deciding the policy on every access:

- on_hit(line, clock): update ordering metadata of a line that hit
- on_insert(line, clock): stamp a freshly filled (or overwritten) line
- select_victim(cache_set): return the slot to evict from a full set

Ordering metadata is the `order` field of each CacheLine, stamped from a
PolicyClock owned by the simulation run. The victim is always the line with
the smallest `order`, lowest slot first on ties, so FIFO and LRU only differ
in whether a hit refreshes the stamp.
"""

from typing import Dict, List, Type

from .cache import CacheLine, ConfigurationError


class PolicyClock:
    """Monotonic counter shared by every set of one simulation run."""

    def __init__(self, start: int = 1):
        self.start = start
        self.value = start

    def tick(self) -> int:
        self.value += 1
        return self.value

    def reset(self) -> None:
        self.value = self.start


class ReplacementPolicy:
    name = ''

    def on_hit(self, line: CacheLine, clock: PolicyClock) -> None:
        raise NotImplementedError

    def on_insert(self, line: CacheLine, clock: PolicyClock) -> None:
        line.order = clock.tick()

    def select_victim(self, cache_set: List[CacheLine]) -> int:
        victim = 0
        for wi, line in enumerate(cache_set):
            # strictly smaller: first-seen line wins ties
            if line.order < cache_set[victim].order:
                victim = wi
        return victim

    def __repr__(self):
        return f"{type(self).__name__}()"


class FIFOReplacement(ReplacementPolicy):
    """First-In-First-Out: lines are ordered by insertion time only."""

    name = 'FIFO'

    def on_hit(self, line: CacheLine, clock: PolicyClock) -> None:
        return


class LRUReplacement(ReplacementPolicy):
    """Least-Recently-Used: a hit re-stamps the line as most recently used."""

    name = 'LRU'

    def on_hit(self, line: CacheLine, clock: PolicyClock) -> None:
        line.order = clock.tick()


POLICIES: Dict[str, Type[ReplacementPolicy]] = {
    'FIFO': FIFOReplacement,
    'LRU': LRUReplacement,
}


def make_policy(name: str) -> ReplacementPolicy:
    """Build the policy registered under `name` (case-insensitive)."""
    key = name.upper() if isinstance(name, str) else name
    if key not in POLICIES:
        raise ConfigurationError(f"unknown eviction policy {name!r} (one of 'FIFO', 'LRU')")
    return POLICIES[key]()


__all__ = ["PolicyClock", "ReplacementPolicy", "FIFOReplacement", "LRUReplacement", "POLICIES", "make_policy"]
