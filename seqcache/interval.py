"""Genomic interval holding a cached stretch of reference sequence."""

from __future__ import annotations

import dataclasses
from typing import Optional

from seqcache.errors import IntervalOutOfRangeError
from seqcache.utils.locus import format_locus


@dataclasses.dataclass(frozen=True)
class SequenceInterval:
    """A 0-based, half-open range on one chromosome plus its sequence.

    Attributes:
        chromosome: Chromosome name
        start: First base of the range (inclusive)
        end: End of the range (exclusive)
        payload: Sequence covering ``[start, end)``, or None when the source
                 has no data for the chromosome
    """

    chromosome: str
    start: int
    end: int
    payload: Optional[str] = None

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(
                f"Invalid interval coordinates: {self.chromosome}:{self.start}-{self.end}"
            )
        if self.payload is not None and len(self.payload) != self.end - self.start:
            raise ValueError(
                f"Payload length {len(self.payload)} does not match interval "
                f"length {self.end - self.start} for {self.locus_string}"
            )

    def __len__(self) -> int:
        return self.end - self.start

    @property
    def locus_string(self) -> str:
        return format_locus(self.chromosome, self.start, self.end)

    def contains(self, chromosome: str, start: int, end: int) -> bool:
        """Return True if ``[start, end)`` on ``chromosome`` lies inside this interval."""
        return chromosome == self.chromosome and start >= self.start and end <= self.end

    def contains_range(self, other: "SequenceInterval") -> bool:
        """Return True if ``other`` is fully covered by this interval.

        Equal ranges count as contained, so an interval subsumes its duplicates.
        """
        return self.contains(other.chromosome, other.start, other.end)

    def overlaps(self, chromosome: str, start: int, end: int) -> bool:
        return chromosome == self.chromosome and start < self.end and end > self.start

    def slice(self, start: int, end: int) -> Optional[str]:
        """Return the sequence for ``[start, end)``.

        Args:
            start: Start of the requested range, inside this interval
            end: End of the requested range, inside this interval

        Returns:
            str or None: The sequence segment, or None if this interval has no payload

        Raises:
            IntervalOutOfRangeError: If the range is not contained in this interval
        """
        if start > end or not self.contains(self.chromosome, start, end):
            raise IntervalOutOfRangeError(
                f"Range {start}-{end} is outside interval {self.locus_string}"
            )
        if self.payload is None:
            return None
        offset = start - self.start
        return self.payload[offset:offset + (end - start)]
