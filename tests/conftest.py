"""Shared pytest fixtures for seqcache tests."""

import asyncio
from typing import Dict, List, Optional, Tuple

import pytest

from seqcache.sources.base import ChromosomeRecord, SequenceSource


# ============================================================================
# Mock sources
# ============================================================================

class MockSequenceSource(SequenceSource):
    """Source returning a run of a single base for every read.

    Every read is recorded in ``calls`` so tests can count upstream round
    trips. Reads for ``noSuchChr`` (or any chromosome not in ``lengths``)
    resolve to None. Reads are clamped to the chromosome length.

    Args:
        delay: Seconds each read waits before settling
        base: Character the returned sequence is made of
        failures: Number of initial reads that raise ``ConnectionError``
        lengths: Chromosome lengths keyed by name
    """

    def __init__(
        self,
        delay: float = 0,
        base: str = "A",
        failures: int = 0,
        lengths: Optional[Dict[str, int]] = None,
    ):
        self.delay = delay
        self.base = base
        self.failures = failures
        self.lengths = lengths if lengths is not None else {"chr1": 10_000_000, "chr2": 5_000_000}
        self.calls: List[Tuple[str, int, int]] = []
        self.initialized = False

    async def init(self) -> None:
        self.initialized = True

    @property
    def chromosomes(self) -> Dict[str, ChromosomeRecord]:
        return {
            name: ChromosomeRecord(name=name, order=order, bp_length=length)
            for order, (name, length) in enumerate(self.lengths.items())
        }

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def read_sequence(self, chromosome: str, start: int, end: int) -> Optional[str]:
        self.calls.append((chromosome, start, end))
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        if self.failures > 0:
            self.failures -= 1
            raise ConnectionError("Network error")
        if chromosome not in self.lengths:
            return None
        end = min(end, self.lengths[chromosome])
        return self.base * max(0, end - start)


class PositionalSequenceSource(MockSequenceSource):
    """Source whose base at position ``p`` is ``"ACGT"[p % 4]``.

    Lets tests check that slices come from the right offset, not just that
    they have the right length.
    """

    async def read_sequence(self, chromosome: str, start: int, end: int) -> Optional[str]:
        sequence = await super().read_sequence(chromosome, start, end)
        if sequence is None:
            return None
        return expected_sequence(start, start + len(sequence))


def expected_sequence(start: int, end: int) -> str:
    return "".join("ACGT"[p % 4] for p in range(start, end))


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def source():
    """Mock source with no latency."""
    return MockSequenceSource()


@pytest.fixture
def slow_source():
    """Mock source with a short latency so concurrent requests overlap."""
    return MockSequenceSource(delay=0.01)


@pytest.fixture
def positional_source():
    return PositionalSequenceSource()


@pytest.fixture
def fasta_file(tmp_path):
    """Write a small two-sequence FASTA file.

    Returns:
        Path: Path to the (unindexed) FASTA file
    """
    fasta = tmp_path / "reference.fa"
    fasta.write_text(
        ">chrA\n"
        "ACGTACGTAC\n"
        "GTACGTACGT\n"
        "ACGT\n"
        ">chrB\n"
        "TTTTGGGGCC\n"
        "CCAAAA\n"
    )
    return fasta


@pytest.fixture
def make_source():
    """Factory for mock sources with custom latency, failures or chromosomes."""

    def _make(**kwargs) -> MockSequenceSource:
        return MockSequenceSource(**kwargs)

    return _make
