"""Visible genomic windows used to prune off-screen cache entries.

The cache only needs two things from its viewport collaborator: how many
frames there are (``len``) and, per frame, whether it overlaps a cached
interval. ``ViewportSet`` is a small mutable container satisfying that; any
sized iterable of objects with an ``overlaps(interval)`` method works too.
"""

from __future__ import annotations

import dataclasses
from typing import Iterable, Iterator, List

from seqcache.interval import SequenceInterval
from seqcache.utils.locus import format_locus, parse_locus


@dataclasses.dataclass(frozen=True)
class ReferenceFrame:
    """A window currently shown to the user, in 0-based half-open coordinates."""

    chromosome: str
    start: int
    end: int

    @classmethod
    def from_locus(cls, locus: str) -> "ReferenceFrame":
        chromosome, start, end = parse_locus(locus)
        if end is None:
            raise ValueError(f"Reference frame needs an explicit range: {locus!r}")
        return cls(chromosome, start, end)

    @property
    def locus_string(self) -> str:
        return format_locus(self.chromosome, self.start, self.end)

    def overlaps(self, interval: SequenceInterval) -> bool:
        return interval.overlaps(self.chromosome, self.start, self.end)


class ViewportSet:
    """Ordered collection of the reference frames currently in view."""

    def __init__(self, frames: Iterable[ReferenceFrame] = ()):
        self._frames: List[ReferenceFrame] = list(frames)

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[ReferenceFrame]:
        return iter(self._frames)

    def add(self, frame: ReferenceFrame) -> None:
        self._frames.append(frame)

    def remove(self, frame: ReferenceFrame) -> None:
        self._frames.remove(frame)

    def replace(self, frames: Iterable[ReferenceFrame]) -> None:
        """Swap in a new set of frames, e.g. after the user jumps to another locus."""
        self._frames = list(frames)

    def clear(self) -> None:
        self._frames = []

    def overlaps(self, interval: SequenceInterval) -> bool:
        """Return True if any frame overlaps ``interval``."""
        return any(frame.overlaps(interval) for frame in self._frames)
