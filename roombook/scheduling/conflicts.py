"""
Conflict Gate

Accept/reject check run right before a reservation is inserted or moved.
The check and the write that follows are separate statements, so two
concurrent bookings for the same room can both pass.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Optional

from sqlalchemy.orm import Session

from roombook.errors import InvalidInterval, ReservationConflict
from roombook.models import Reservation
from roombook.timeutils import to_utc, utc_iso_z
from .overlap import overlaps


def validate_interval(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    """Normalize both ends to UTC and require end > start."""
    start, end = to_utc(start), to_utc(end)
    if end <= start:
        raise InvalidInterval("End time must be after start time.")
    return start, end


def find_conflict(
    db: Session,
    room_id: str,
    start: datetime,
    end: datetime,
    exclude_id: Optional[str] = None,
) -> Optional[Reservation]:
    """
    Return the earliest reservation of ``room_id`` overlapping [start, end).

    Args:
        db: session
        room_id: room to check
        start, end: proposed interval
        exclude_id: reservation being edited, ignored by the check

    Raises:
        InvalidInterval: if end <= start
    """
    start, end = validate_interval(start, end)

    query = db.query(Reservation).filter(
        Reservation.room_id == room_id,
        Reservation.start_time < end,
        Reservation.end_time > start,
    )
    if exclude_id:
        query = query.filter(Reservation.id != exclude_id)

    return query.order_by(Reservation.start_time.asc()).first()


def describe_conflict(reservation: Any) -> dict[str, Any]:
    return {
        "id": reservation.id,
        "title": reservation.title,
        "startTime": utc_iso_z(reservation.start_time),
        "endTime": utc_iso_z(reservation.end_time),
    }


def ensure_no_conflict(
    db: Session,
    room_id: str,
    start: datetime,
    end: datetime,
    exclude_id: Optional[str] = None,
) -> None:
    """Raise ReservationConflict carrying the colliding reservation, if any."""
    conflict = find_conflict(db, room_id, start, end, exclude_id=exclude_id)
    if conflict is not None:
        raise ReservationConflict(describe_conflict(conflict))


def find_conflicts(
    start: datetime,
    end: datetime,
    existing: Iterable[Any],
    exclude_id: Optional[str] = None,
) -> list[Any]:
    """In-memory variant over already loaded reservations, earliest first."""
    return sorted(
        (
            r for r in existing
            if r.id != exclude_id and overlaps(start, end, r.start_time, r.end_time)
        ),
        key=lambda r: r.start_time,
    )
