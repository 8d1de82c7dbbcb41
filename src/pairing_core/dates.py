"""
Calendar helpers for fills: month/day labels, moved-order detection.

All conversions go through an explicit timezone so results do not depend
on the host's local time. Pure functions; no I/O.
"""

from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from typing import Sequence

from pairing_core.contracts import Fill


def fill_datetime(timestamp_ms: int, tz: tzinfo = timezone.utc) -> datetime:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=tz)


def fill_date(fill: Fill, tz: tzinfo = timezone.utc) -> date:
    return fill_datetime(fill.timestamp, tz).date()


def month_day_label(timestamp_ms: int, tz: tzinfo = timezone.utc) -> str:
    """Short label such as ``"Dec 5"``."""
    dt = fill_datetime(timestamp_ms, tz)
    return f"{dt:%b} {dt.day}"


def format_date_range(start_ms: int, end_ms: int, tz: tzinfo = timezone.utc) -> str:
    """``"Dec 5"`` when both ends fall on the same calendar day, else ``"Dec 5 - Dec 7"``."""
    start = month_day_label(start_ms, tz)
    if fill_datetime(start_ms, tz).date() == fill_datetime(end_ms, tz).date():
        return start
    return f"{start} - {month_day_label(end_ms, tz)}"


def is_moved_order(fill: Fill, primary_group: Sequence[Fill], tz: tzinfo = timezone.utc) -> bool:
    """True when *fill* falls on a different calendar day than ``primary_group[0]``.

    Used to flag legs folded into a position that spans several days.
    An empty group never marks anything as moved.
    """
    if not primary_group:
        return False
    return fill_date(fill, tz) != fill_date(primary_group[0], tz)


def day_of_month(fill: Fill, tz: tzinfo = timezone.utc) -> int:
    """Calendar day number of the fill, for display next to moved legs."""
    return fill_datetime(fill.timestamp, tz).day
