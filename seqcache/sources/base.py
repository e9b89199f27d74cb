"""Contract for upstream sequence sources consumed by ``SequenceCache``."""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from typing import Dict, List, Optional


@dataclasses.dataclass(frozen=True)
class ChromosomeRecord:
    name: str
    order: int
    bp_length: int


class SequenceSource(ABC):
    """Base class for sources performing the actual ranged sequence reads.

    Subclasses must implement ``read_sequence`` and ``chromosomes``. The cache
    also accepts duck-typed objects exposing the same names, so test doubles
    and third-party readers do not need to inherit from this class.
    """

    async def init(self) -> None:
        """Prepare the source for reading. The default implementation does nothing."""

    @property
    @abstractmethod
    def chromosomes(self) -> Dict[str, ChromosomeRecord]:
        """Mapping from chromosome name to its record, resident in memory."""

    @property
    def chromosome_names(self) -> List[str]:
        return list(self.chromosomes)

    def get_sequence_record(self, chromosome: str) -> Optional[ChromosomeRecord]:
        return self.chromosomes.get(chromosome)

    def get_first_chromosome_name(self) -> Optional[str]:
        names = self.chromosome_names
        return names[0] if names else None

    @abstractmethod
    async def read_sequence(self, chromosome: str, start: int, end: int) -> Optional[str]:
        """Read the sequence for ``[start, end)`` on ``chromosome``.

        Returns:
            str or None: The sequence, or None if the source has no data for
            the chromosome. The sequence may be shorter than requested when
            the range runs past the end of the chromosome.

        Raises:
            Exception: Any failure to read; it is propagated to the caller as is.
        """
