"""
Availability Projection

Marks each slot of a room's day as free or taken and attaches the
reservation occupying it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from .overlap import overlaps
from .slots import Slot, bookable_durations


@dataclass(frozen=True)
class SlotAvailability:
    slot: Slot
    is_available: bool
    reservation: Optional[Any] = None
    # booking lengths (minutes) that fit from this slot, empty when taken
    durations: tuple[int, ...] = ()


def project_availability(slots: Sequence[Slot], reservations: Iterable[Any]) -> list[SlotAvailability]:
    """
    Project a room's reservations for one day onto the slot grid.

    Args:
        slots: output of ``slot_grid``
        reservations: objects exposing ``start_time`` / ``end_time``

    Returns:
        list[SlotAvailability]: one entry per slot, same order as ``slots``.
        When several reservations cover a slot, the one starting first wins.
        Free slots also carry the duration options that stay clear of
        every reservation.
    """
    # sorted() is stable, so input order settles equal start times
    ordered = sorted(reservations, key=lambda r: r.start_time)

    projected = []
    for slot in slots:
        occupant = next(
            (r for r in ordered if overlaps(slot.start, slot.end, r.start_time, r.end_time)),
            None,
        )
        durations = tuple(bookable_durations(slot.start, ordered)) if occupant is None else ()
        projected.append(SlotAvailability(
            slot=slot, is_available=occupant is None, reservation=occupant, durations=durations,
        ))
    return projected
