"""Indexed FASTA source backed by pysam.

Reads go through ``pysam.FastaFile`` and are executed on a dedicated
single-worker thread pool, so the event loop driving the cache is never
blocked by disk I/O and the (not thread-safe) file handle is only ever touched
from one thread.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Optional, Union

import pysam

from seqcache.errors import SourceNotReadyError, SourceReadError
from seqcache.sources.base import ChromosomeRecord, SequenceSource
from seqcache.utils.logging import get_logger

logger = get_logger("sources.fasta")


class FastaSequenceSource(SequenceSource):
    """Sequence source reading from a FASTA file with a ``.fai`` index.

    A missing index is built with ``pysam.faidx`` during ``init()``.

    Args:
        fasta_path: Path to the FASTA file (plain or bgzip-compressed)
        index_path: Optional explicit path to the ``.fai`` index
    """

    def __init__(self, fasta_path: Union[Path, str], index_path: Optional[Union[Path, str]] = None):
        self.fasta_path = Path(fasta_path).expanduser()
        self.index_path = (
            Path(index_path).expanduser()
            if index_path is not None
            else Path(str(self.fasta_path) + ".fai")
        )
        self._fasta: Optional[pysam.FastaFile] = None
        self._chromosomes: Dict[str, ChromosomeRecord] = {}
        self._executor: Optional[ThreadPoolExecutor] = None

    async def __aenter__(self) -> "FastaSequenceSource":
        await self.init()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._fasta is not None

    async def init(self) -> None:
        if self._fasta is not None:
            return
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="seqcache-fasta")
        loop = asyncio.get_running_loop()
        self._fasta = await loop.run_in_executor(self._executor, self._open)
        self._chromosomes = {
            name: ChromosomeRecord(name=name, order=order, bp_length=length)
            for order, (name, length) in enumerate(
                zip(self._fasta.references, self._fasta.lengths)
            )
        }
        logger.info(
            f"Opened {self.fasta_path} with {len(self._chromosomes)} sequences"
        )

    def _open(self) -> pysam.FastaFile:
        if not self.fasta_path.exists():
            raise FileNotFoundError(f"FASTA file not found: {self.fasta_path}")
        if not self.index_path.exists():
            logger.info(f"Building FASTA index: {self.index_path}")
            pysam.faidx("--fai-idx", str(self.index_path), str(self.fasta_path))
        return pysam.FastaFile(str(self.fasta_path), filepath_index=str(self.index_path))

    @property
    def chromosomes(self) -> Dict[str, ChromosomeRecord]:
        return self._chromosomes

    async def read_sequence(self, chromosome: str, start: int, end: int) -> Optional[str]:
        if self._fasta is None:
            raise SourceNotReadyError(
                f"FASTA source {self.fasta_path} used before init()"
            )

        record = self._chromosomes.get(chromosome)
        if record is None:
            logger.debug(f"No sequence named {chromosome} in {self.fasta_path}")
            return None

        end = min(end, record.bp_length)
        if start >= end:
            return ""

        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(
                self._executor, self._fasta.fetch, chromosome, start, end
            )
        except (OSError, ValueError) as e:
            raise SourceReadError(
                f"Failed to read {chromosome}:{start}-{end} from {self.fasta_path}: {e}"
            ) from e

    def close(self) -> None:
        """Close the file and its worker thread. A later ``init()`` reopens both."""
        if self._fasta is not None:
            self._fasta.close()
            self._fasta = None
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
