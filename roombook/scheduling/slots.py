"""
Slot Grid

Fixed catalog of bookable start-times for a business day. The grid knows
nothing about reservations; see availability.py for that.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from roombook.config import get_settings
from .overlap import overlaps

SLOT_MINUTES = 30
FIRST_SLOT_START = time(9, 30)
# Contiguous through 18:30: 18:00 is a bookable start like any other (19 slots).
LAST_SLOT_START = time(18, 30)

# Booking lengths offered once a start slot has been picked.
DURATION_OPTIONS = (30, 60, 90, 120, 150, 180, 210, 240)


@dataclass(frozen=True)
class Slot:
    start: datetime
    end: datetime

    @property
    def label(self) -> str:
        return self.start.strftime("%H:%M")


def business_timezone() -> ZoneInfo:
    return ZoneInfo(get_settings().business_timezone)


def slot_grid(day: date, tz: Optional[tzinfo] = None) -> list[Slot]:
    """
    Build the slot grid for ``day``.

    Args:
        day: calendar day
        tz: timezone the business hours are expressed in; defaults to
            ``BUSINESS_TIMEZONE``

    Returns:
        list[Slot]: 30-minute slots starting 09:30 through 18:30, in order
    """
    tz = tz or business_timezone()
    step = timedelta(minutes=SLOT_MINUTES)

    slots = []
    current = datetime.combine(day, FIRST_SLOT_START, tzinfo=tz)
    last = datetime.combine(day, LAST_SLOT_START, tzinfo=tz)
    while current <= last:
        slots.append(Slot(start=current, end=current + step))
        current = current + step

    return slots


def bookable_durations(start: datetime, reservations: Iterable) -> list[int]:
    """Duration options (minutes) from ``start`` that collide with no reservation."""
    reservations = list(reservations)
    allowed = []
    for minutes in DURATION_OPTIONS:
        end = start + timedelta(minutes=minutes)
        if not any(overlaps(start, end, r.start_time, r.end_time) for r in reservations):
            allowed.append(minutes)
    return allowed
