"""Exceptions raised by the seqcache package.

Failures raised by an upstream source are never wrapped by the cache; they
reach every caller that was waiting on the failed read unchanged.
"""


class SequenceCacheError(RuntimeError):
    pass


class SourceReadError(SequenceCacheError):
    """The upstream source failed to read the requested range."""


class SourceNotReadyError(SequenceCacheError):
    """The source was used before ``init()`` completed."""


class IntervalOutOfRangeError(SequenceCacheError, IndexError):
    """A slice was requested outside the bounds of an interval."""


class ConfigError(SequenceCacheError, ValueError):
    pass
