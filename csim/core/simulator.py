"""CacheSimulator coordinates cache accesses and statistics.
Replays trace records against the core Cache, one cache line at a time.
"""
import logging
from enum import Enum
from typing import Callable, Iterable, List, Optional, Union

from .cache import Cache, CacheGeometry
from .replacement_policies import PolicyClock, ReplacementPolicy, make_policy
from .trace import Operation, TraceRecord
from ..data.stats_export import Statistics

logger = logging.getLogger(__name__)


class AccessOutcome(Enum):
    HIT = 'HIT'
    MISS = 'MISS'
    MISS_EVICTION = 'MISS+EVICTION'


class CacheSimulator:
    """One simulation run: owns the store, the policy clock and the statistics."""

    def __init__(self, geometry: CacheGeometry, policy: Union[str, ReplacementPolicy] = 'LRU',
                 stats: Optional[Statistics] = None):
        self.geometry = geometry
        self.cache = Cache(geometry)
        self.policy = make_policy(policy) if isinstance(policy, str) else policy
        self.clock = PolicyClock()
        self.stats = stats or Statistics()

    def reset(self):
        # clear stats, rewind the clock and invalidate every line
        self.stats.reset()
        self.clock.reset()
        self.cache.reset()

    def access_line(self, address: int) -> AccessOutcome:
        """Simulate an access to the cache line holding `address`."""
        set_index, tag = self.cache.decompose(address)
        cache_set = self.cache.sets[set_index]

        wi = self.cache.lookup(set_index, tag)
        if wi is not None:
            self.policy.on_hit(cache_set[wi], self.clock)
            self.stats.record_access(True)
            return AccessOutcome.HIT

        wi = self.cache.find_free_slot(set_index)
        if wi is not None:
            line = cache_set[wi]
            line.tag = tag
            line.valid = True
            self.policy.on_insert(line, self.clock)
            self.stats.record_access(False)
            return AccessOutcome.MISS

        # set is full: overwrite the victim in place, it stays valid
        wi = self.policy.select_victim(cache_set)
        victim = cache_set[wi]
        victim.tag = tag
        self.policy.on_insert(victim, self.clock)
        self.stats.record_access(False, evicted=True)
        return AccessOutcome.MISS_EVICTION

    def access(self, record: TraceRecord) -> List[AccessOutcome]:
        """Replay one trace record and return the outcome of every line access.

        Loads and stores touch each line once; a modify is a read followed
        by a write of the same line. Other operations are ignored.
        """
        if not record.is_data_access:
            return []
        repeat = 2 if record.operation is Operation.MODIFY else 1
        outcomes = []
        for address in record.line_addresses(self.geometry.block_size):
            for _ in range(repeat):
                outcomes.append(self.access_line(address))
        return outcomes

    def run_all(self, records: Iterable[TraceRecord],
                callback: Optional[Callable[[TraceRecord, List[AccessOutcome]], None]] = None) -> Statistics:
        g = self.geometry
        logger.debug("replaying trace: S=%d K=%d B=%d policy=%s", g.num_sets, g.lines_per_set,
                     g.block_size, self.policy.name)
        count = 0
        for record in records:
            outcomes = self.access(record)
            if not outcomes:
                continue
            count += 1
            if callback:
                callback(record, outcomes)
        logger.debug("replayed %d records: %s", count, self.stats.summary())
        return self.stats
