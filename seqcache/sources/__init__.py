"""Upstream sequence sources."""

from seqcache.sources.base import ChromosomeRecord, SequenceSource
from seqcache.sources.fasta import FastaSequenceSource

__all__ = ["ChromosomeRecord", "SequenceSource", "FastaSequenceSource"]
