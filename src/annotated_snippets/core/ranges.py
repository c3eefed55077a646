"""Line-range strings such as ``"3,5-8"``.

Each comma-separated part is either ``N`` or ``N-M`` (1-based, inclusive).
Parts that do not start with an integer never match anything and are dropped
from the range list instead of failing the whole string.
"""

import re
from collections.abc import Callable

from annotated_snippets.models import HighlightRange

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _parse_int(value: str) -> int | None:
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def _parse_part(part: str) -> tuple[int | None, int | None]:
    start, _, end = part.partition("-")
    return _parse_int(start), _parse_int(end)


def parse_ranges(value: str | None) -> list[HighlightRange]:
    """Parse ``value`` into 1-based inclusive ranges, skipping malformed parts."""
    if not value:
        return []

    ranges: list[HighlightRange] = []
    for part in value.split(","):
        start, end = _parse_part(part)
        if start is None:
            continue
        # An absent or zero end means a single line.
        resolved_end = end if end else start
        if resolved_end < start:
            continue
        ranges.append(HighlightRange(start=start, end=resolved_end))
    return ranges


def line_range_predicate(value: str | None) -> Callable[[int], bool]:
    """Return ``is_in_range(line_index)`` for zero-based line indexes."""
    ranges = parse_ranges(value)
    if not ranges:
        return lambda _index: False

    def is_in_range(line_index: int) -> bool:
        line_number = line_index + 1
        return any(r.start <= line_number <= r.end for r in ranges)

    return is_in_range


def zero_based(ranges: list[HighlightRange]) -> list[tuple[int, int]]:
    return [(r.start - 1, r.end - 1) for r in ranges]
