"""Helpers for converting between locus strings and 0-based coordinates.

Locus strings use the 1-based, fully closed form shown to users
(``chr1:1,001-2,000``); everything inside the package works on 0-based,
half-open coordinates (``("chr1", 1000, 2000)``).
"""

import re
from typing import Optional, Tuple

_LOCUS_RE = re.compile(r"^(?P<chr>[^:\s]+)(?::(?P<start>[\d,]+)(?:-(?P<end>[\d,]+))?)?$")


def parse_locus(locus: str) -> Tuple[str, int, Optional[int]]:
    """Parse a locus string into 0-based, half-open coordinates.

    Accepted forms:
        - ``chr1`` -> whole chromosome, returned as ``("chr1", 0, None)``
        - ``chr1:1000`` -> the single base at position 1000
        - ``chr1:1,001-2,000`` -> thousands separators are allowed

    Args:
        locus: Locus string to parse

    Returns:
        tuple: (chromosome, start, end) where end is None for a whole chromosome

    Raises:
        ValueError: If the string is not a valid locus
    """
    match = _LOCUS_RE.match(locus.strip())
    if not match:
        raise ValueError(f"Invalid locus string: {locus!r}")

    chromosome = match.group("chr")
    if match.group("start") is None:
        return chromosome, 0, None

    start = int(match.group("start").replace(",", ""))
    end_str = match.group("end")
    end = int(end_str.replace(",", "")) if end_str is not None else start

    if start < 1 or end < start:
        raise ValueError(f"Invalid locus range: {locus!r}")

    return chromosome, start - 1, end


def format_locus(chromosome: str, start: int, end: int) -> str:
    """Format 0-based, half-open coordinates as a 1-based locus string."""
    return f"{chromosome}:{start + 1}-{end}"
