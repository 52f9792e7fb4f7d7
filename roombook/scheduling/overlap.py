"""Half-open interval overlap."""

from __future__ import annotations

from datetime import datetime


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Return True if [a_start, a_end) and [b_start, b_end) share an instant.

    Touching intervals (a_end == b_start) do not overlap, and an empty
    interval (start == end) overlaps nothing.
    """
    return a_start < b_end and a_end > b_start and a_start < a_end and b_start < b_end
