"""Reference sequence cache package.

seqcache keeps recently read reference sequence in memory so that a genome view
panning and zooming over the same neighbourhood does not go back to the slow
upstream source for every small request. Misses are widened to a minimum query
window, concurrent misses over the same window share a single upstream read,
and the cache is kept small by pruning subsumed, old and off-screen intervals.
"""

# Package-wide defaults
DEFAULT_MIN_QUERY_SIZE = 100_000
DEFAULT_MAX_INTERVALS = 10
DEFAULT_VIEWPORT_CHECK_LIMIT = 100
