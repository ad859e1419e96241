"""Core cache store

This file provides the set-associative cache state used by the simulator.
Behavior:
- The store is composed of `num_sets` sets; each set has `lines_per_set` lines.
- Addresses are 64-bit. Bit layout from most to least significant is
  tag | set index | block offset:
  set_index = (address >> block_bits) & (num_sets - 1)
  tag = address >> (set_bits + block_bits)
- The store only answers lookups. Hit/miss classification and victim
  selection happen in the simulator and the replacement policies.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

ADDRESS_LENGTH = 64
ADDRESS_MASK = (1 << ADDRESS_LENGTH) - 1


class ConfigurationError(ValueError):
    """Invalid cache geometry or eviction policy."""


def is_power_of_two(value: int) -> bool:
    return value > 0 and (value & (value - 1)) == 0


@dataclass(frozen=True)
class CacheGeometry:
    """Shape of the cache, fixed for the lifetime of a simulation.

    Fields:
    - num_sets: S, number of sets (power of two)
    - lines_per_set: K, lines per set
    - block_size: B, bytes per line (power of two)
    """

    num_sets: int
    lines_per_set: int
    block_size: int

    def __post_init__(self):
        for label, value in (('S', self.num_sets), ('K', self.lines_per_set), ('B', self.block_size)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{label} must be an integer, got {value!r}")
            if value <= 0:
                raise ConfigurationError(f"{label} must be > 0")
        if not is_power_of_two(self.num_sets):
            raise ConfigurationError("S must be a power of 2")
        if not is_power_of_two(self.block_size):
            raise ConfigurationError("B must be a power of 2")
        if self.set_bits + self.block_bits > ADDRESS_LENGTH:
            raise ConfigurationError(f"S * B must fit in a {ADDRESS_LENGTH}-bit address")

    @property
    def set_bits(self) -> int:
        return self.num_sets.bit_length() - 1

    @property
    def block_bits(self) -> int:
        return self.block_size.bit_length() - 1

    @property
    def tag_bits(self) -> int:
        return ADDRESS_LENGTH - self.set_bits - self.block_bits

    @property
    def set_mask(self) -> int:
        return self.num_sets - 1


@dataclass
class CacheLine:
    """container for a cache line (slot).

    Fields:
    - tag: the tag stored in the line
    - valid: whether the line currently holds a block
    - order: policy clock value stamped at insertion (FIFO) or at
      insertion/last hit (LRU); only compared within one set
    """

    tag: int = 0
    valid: bool = False
    order: int = 0


class Cache:
    """Fixed-geometry collection of sets, indexed by the set-index bits."""

    def __init__(self, geometry: CacheGeometry):
        self.geometry = geometry
        # sets matrix: num_sets x lines_per_set
        self.sets: List[List[CacheLine]] = [
            [CacheLine() for _ in range(geometry.lines_per_set)]
            for _ in range(geometry.num_sets)
        ]

    def decompose(self, address: int) -> Tuple[int, int]:
        """Split an address into (set_index, tag)."""
        address &= ADDRESS_MASK
        g = self.geometry
        set_index = (address >> g.block_bits) & g.set_mask
        tag = address >> (g.set_bits + g.block_bits)
        return set_index, tag

    def lookup(self, set_index: int, tag: int) -> Optional[int]:
        """Return the slot holding `tag` in the given set, or None."""
        for wi, line in enumerate(self.sets[set_index]):
            if line.valid and line.tag == tag:
                return wi
        return None

    def find_free_slot(self, set_index: int) -> Optional[int]:
        """Return the lowest invalid slot of the given set, or None when full."""
        for wi, line in enumerate(self.sets[set_index]):
            if not line.valid:
                return wi
        return None

    def line(self, set_index: int, slot: int) -> CacheLine:
        return self.sets[set_index][slot]

    def occupancy(self, set_index: int) -> int:
        return sum(1 for line in self.sets[set_index] if line.valid)

    def reset(self):
        """Invalidate every line and clear its metadata."""
        for s in self.sets:
            for line in s:
                line.tag = 0
                line.valid = False
                line.order = 0
