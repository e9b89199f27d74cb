"""Read-through cache for reference sequence.

``SequenceCache`` wraps a slow sequence source and serves repeated requests
for small, overlapping ranges from memory. Key behaviours:

- a miss is widened to at least ``min_query_size`` bases centred on the request
- concurrent misses that fall inside a window already being read join that
  read instead of issuing their own (single-flight)
- before each new interval is stored, cached intervals it subsumes are
  dropped, the oldest entry is evicted when the cache is full (FIFO), and,
  when viewports are tracked, entries overlapping no viewport are pruned

All bookkeeping happens on one asyncio event loop. The only suspension point
is the await on the shared read; the in-flight table is checked and updated
without awaiting in between, which is what makes the check-then-register step
atomic with respect to other callers.
"""

from __future__ import annotations

import asyncio
import dataclasses
from typing import Any, Dict, List, Optional, Tuple

from seqcache import (
    DEFAULT_MAX_INTERVALS,
    DEFAULT_MIN_QUERY_SIZE,
    DEFAULT_VIEWPORT_CHECK_LIMIT,
)
from seqcache.config import CacheConfig
from seqcache.interval import SequenceInterval
from seqcache.utils.logging import get_logger

logger = get_logger("cache")


@dataclasses.dataclass
class CacheStats:
    """Counters describing how requests were served.

    Attributes:
        hits: Requests answered from a cached interval
        misses: Requests that needed a settled read (own or joined)
        coalesced: Misses that joined a read already in flight
        source_reads: Reads issued to the upstream source
        evicted: Intervals dropped because the cache was full
        pruned: Intervals dropped as subsumed or out of view
        discarded: Settled reads not stored because the cache was cleared meanwhile
    """

    hits: int = 0
    misses: int = 0
    coalesced: int = 0
    source_reads: int = 0
    evicted: int = 0
    pruned: int = 0
    discarded: int = 0


@dataclasses.dataclass
class _InflightQuery:
    key: str
    interval: SequenceInterval
    generation: int
    task: Optional["asyncio.Task[SequenceInterval]"] = None


def _retrieve_exception(task: "asyncio.Task[SequenceInterval]") -> None:
    # Callers may all have gone away; mark the failure as seen so asyncio
    # does not report it as never retrieved.
    if not task.cancelled():
        task.exception()


class SequenceCache:
    """Caching wrapper around a sequence source.

    Args:
        source: Upstream source (see ``seqcache.sources.base.SequenceSource``)
        viewports: Optional sized collection of visible frames, each with an
                   ``overlaps(interval)`` method. When None, visibility
                   pruning is skipped.
        min_query_size: Minimum number of bases read from the source per miss
        max_intervals: Maximum number of cached intervals
        viewport_check_limit: Visibility pruning only runs while fewer than
                              this many viewports are tracked
    """

    def __init__(
        self,
        source: Any,
        viewports: Optional[Any] = None,
        *,
        min_query_size: int = DEFAULT_MIN_QUERY_SIZE,
        max_intervals: int = DEFAULT_MAX_INTERVALS,
        viewport_check_limit: int = DEFAULT_VIEWPORT_CHECK_LIMIT,
    ):
        if min_query_size <= 0 or max_intervals <= 0 or viewport_check_limit <= 0:
            raise ValueError("Cache limits must be positive integers")
        self.source = source
        self.viewports = viewports
        self.min_query_size = min_query_size
        self.max_intervals = max_intervals
        self.viewport_check_limit = viewport_check_limit
        self.stats = CacheStats()
        self._cached_intervals: List[SequenceInterval] = []
        self._inflight: Dict[str, _InflightQuery] = {}
        self._generation = 0

    @classmethod
    def from_config(
        cls, source: Any, config: CacheConfig, viewports: Optional[Any] = None
    ) -> "SequenceCache":
        return cls(
            source,
            viewports,
            min_query_size=config.min_query_size,
            max_intervals=config.max_intervals,
            viewport_check_limit=config.viewport_check_limit,
        )

    # Delegations to the source

    async def init(self) -> None:
        await self.source.init()

    @property
    def chromosomes(self):
        return self.source.chromosomes

    @property
    def chromosome_names(self) -> List[str]:
        return self.source.chromosome_names

    def get_sequence_record(self, chromosome: str):
        return self.source.get_sequence_record(chromosome)

    def get_first_chromosome_name(self) -> Optional[str]:
        first = getattr(self.source, "get_first_chromosome_name", None)
        return first() if callable(first) else None

    # Cache state

    @property
    def cached_intervals(self) -> Tuple[SequenceInterval, ...]:
        return tuple(self._cached_intervals)

    @property
    def inflight_count(self) -> int:
        return len(self._inflight)

    def get_sequence_interval(
        self, chromosome: str, start: int, end: int
    ) -> Optional[SequenceInterval]:
        """Return the first cached interval containing the range, or None.

        Never triggers a read.
        """
        for interval in self._cached_intervals:
            if interval.contains(chromosome, start, end):
                return interval
        return None

    def clear_cache(self) -> None:
        """Drop all cached intervals and in-flight bookkeeping.

        Reads already issued keep running and still resolve the callers
        waiting on them, but their results are not stored in the emptied cache.
        """
        logger.debug(
            f"Clearing cache ({len(self._cached_intervals)} intervals, "
            f"{len(self._inflight)} reads in flight)"
        )
        self._cached_intervals = []
        self._inflight.clear()
        self._generation += 1

    # Lookup

    async def get_sequence(self, chromosome: str, start: int, end: int) -> Optional[str]:
        """Return the sequence for ``[start, end)`` on ``chromosome``.

        Args:
            chromosome: Chromosome name
            start: 0-based start (inclusive)
            end: 0-based end (exclusive)

        Returns:
            str or None: The sequence, or None if the source has no data for
            the chromosome

        Raises:
            ValueError: If the coordinates are invalid
            Exception: Whatever the source raised for the underlying read
        """
        if start < 0 or end < start:
            raise ValueError(f"Invalid range: {chromosome}:{start}-{end}")

        start, end = self._clamp_to_chromosome(chromosome, start, end)
        interval = self.get_sequence_interval(chromosome, start, end)
        if interval is not None:
            self.stats.hits += 1
            return interval.slice(start, end)

        self.stats.misses += 1
        query = self._query_for_sequence(chromosome, start, end)
        interval = await asyncio.shield(query.task)

        if query.generation == self._generation:
            self._trim_cache(interval)
            self._cached_intervals.append(interval)
        else:
            self.stats.discarded += 1
            logger.debug(f"Discarding {interval.locus_string}, cache was cleared during the read")

        return self._slice_available(interval, start, end)

    def _clamp_to_chromosome(self, chromosome: str, start: int, end: int) -> Tuple[int, int]:
        # Requests past the chromosome end must still hit the interval read
        # for them, which ends where the sequence does
        get_record = getattr(self.source, "get_sequence_record", None)
        record = get_record(chromosome) if callable(get_record) else None
        length = getattr(record, "bp_length", None)
        if length is None or end <= length:
            return start, end
        return min(start, length), length

    @staticmethod
    def _slice_available(interval: SequenceInterval, start: int, end: int) -> Optional[str]:
        if interval.payload is None:
            return None
        # A read near the chromosome end can come back shorter than the window
        clamped_start = min(max(start, interval.start), interval.end)
        clamped_end = max(min(end, interval.end), clamped_start)
        return interval.slice(clamped_start, clamped_end)

    def _expand_query(self, start: int, end: int) -> Tuple[int, int]:
        width = end - start
        if width >= self.min_query_size:
            return start, end
        # Half-way points round up
        center = start + (width + 1) // 2
        qstart = max(0, center - self.min_query_size // 2)
        return qstart, qstart + self.min_query_size

    def _query_for_sequence(self, chromosome: str, start: int, end: int) -> _InflightQuery:
        """Find or start the read that will cover ``[start, end)``.

        Must not await: registering the new entry before the caller suspends
        is what lets concurrent callers find it.
        """
        for query in self._inflight.values():
            if query.interval.contains(chromosome, start, end):
                self.stats.coalesced += 1
                logger.debug(
                    f"Joining in-flight read {query.key} for {chromosome}:{start}-{end}"
                )
                return query

        qstart, qend = self._expand_query(start, end)
        key = f"{chromosome}:{qstart}-{qend}"
        query = _InflightQuery(
            key=key,
            interval=SequenceInterval(chromosome, qstart, qend),
            generation=self._generation,
        )
        self._inflight[key] = query
        query.task = asyncio.ensure_future(self._read_interval(query))
        query.task.add_done_callback(_retrieve_exception)
        logger.debug(f"Cache miss for {chromosome}:{start}-{end}, reading {key}")
        return query

    async def _read_interval(self, query: _InflightQuery) -> SequenceInterval:
        target = query.interval
        self.stats.source_reads += 1
        try:
            payload = await self.source.read_sequence(target.chromosome, target.start, target.end)
        except Exception as e:
            logger.warning(f"Source read failed for {query.key}: {e}")
            raise
        finally:
            # The entry may already be gone (clear_cache) or replaced by a newer read
            if self._inflight.get(query.key) is query:
                del self._inflight[query.key]

        if payload is None:
            logger.debug(f"Source has no data for {target.chromosome}")
            return SequenceInterval(target.chromosome, target.start, target.end)

        return SequenceInterval(
            target.chromosome, target.start, target.start + len(payload), payload
        )

    def _trim_cache(self, interval: SequenceInterval) -> None:
        """Make room for ``interval``, which is not yet in the cache."""
        kept = [i for i in self._cached_intervals if not interval.contains_range(i)]
        self.stats.pruned += len(self._cached_intervals) - len(kept)
        self._cached_intervals = kept

        if len(self._cached_intervals) >= self.max_intervals:
            oldest = self._cached_intervals.pop(0)
            self.stats.evicted += 1
            logger.debug(f"Cache full, evicting {oldest.locus_string}")

        if self.viewports is not None and len(self.viewports) < self.viewport_check_limit:
            frames = list(self.viewports)
            visible = [i for i in self._cached_intervals if any(f.overlaps(i) for f in frames)]
            if len(visible) < len(self._cached_intervals):
                logger.debug(
                    f"Pruning {len(self._cached_intervals) - len(visible)} intervals out of view"
                )
            self.stats.pruned += len(self._cached_intervals) - len(visible)
            self._cached_intervals = visible
