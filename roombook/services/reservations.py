"""Reservation reads and writes. Every write goes through the conflict gate."""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from roombook.errors import NotFoundError, ReservationConflict
from roombook.models import Reservation, Room, User
from roombook.scheduling.conflicts import ensure_no_conflict, validate_interval
from roombook.scheduling.slots import business_timezone
from roombook.schemas import ReservationCreate, ReservationUpdate
from roombook.services.users import upsert_organizer

logger = logging.getLogger(__name__)


def normalize_attendees(attendees: Iterable[str], organizer_email: Optional[str] = None) -> list[str]:
    """Trim, drop blanks and the organizer, de-duplicate ignoring case."""
    organizer = (organizer_email or "").strip().lower()
    seen = set()
    result = []
    for raw in attendees:
        email = (raw or "").strip()
        key = email.lower()
        if not email or key == organizer or key in seen:
            continue
        seen.add(key)
        result.append(email)
    return result


def list_reservations(
    db: Session,
    room_id: Optional[str] = None,
    user_id: Optional[str] = None,
    organizer_email: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> list[Reservation]:
    """Reservations intersecting [start, end), earliest first."""
    query = db.query(Reservation)
    if room_id:
        query = query.filter(Reservation.room_id == room_id)
    if user_id:
        query = query.filter(Reservation.user_id == user_id)
    if organizer_email:
        query = query.join(User, Reservation.user_id == User.id).filter(User.email == organizer_email)
    if end is not None:
        query = query.filter(Reservation.start_time < end)
    if start is not None:
        query = query.filter(Reservation.end_time > start)
    return query.order_by(Reservation.start_time.asc()).all()


def day_bounds(day: date, tz: Optional[tzinfo] = None) -> tuple[datetime, datetime]:
    tz = tz or business_timezone()
    start = datetime.combine(day, time.min, tzinfo=tz)
    return start, datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)


def reservations_for_day(db: Session, room_id: str, day: date, tz: Optional[tzinfo] = None) -> list[Reservation]:
    start, end = day_bounds(day, tz)
    return list_reservations(db, room_id=room_id, start=start, end=end)


def get_reservation(db: Session, reservation_id: str) -> Reservation:
    reservation = db.get(Reservation, reservation_id)
    if reservation is None:
        raise NotFoundError("Reservation not found.")
    return reservation


def _require_room(db: Session, room_id: str) -> Room:
    room = db.get(Room, room_id)
    if room is None:
        raise NotFoundError("Room not found.")
    return room


def create_reservation(db: Session, payload: ReservationCreate) -> Reservation:
    """
    Validate, gate and insert a reservation.

    Raises:
        InvalidInterval: end <= start
        NotFoundError: unknown room
        ReservationConflict: room already taken in that interval
    """
    start, end = validate_interval(payload.start_time, payload.end_time)
    _require_room(db, payload.room_id)

    organizer = upsert_organizer(db, payload.organizer_email, payload.organizer_name, payload.organizer_id)

    try:
        ensure_no_conflict(db, payload.room_id, start, end)
    except ReservationConflict:
        db.rollback()
        raise

    reservation = Reservation(
        room_id=payload.room_id,
        user_id=organizer.id,
        title=payload.title.strip(),
        description=payload.description or None,
        start_time=start,
        end_time=end,
        attendees=normalize_attendees(payload.attendees, organizer.email),
        google_event_id=payload.google_event_id or None,
    )
    db.add(reservation)
    db.commit()
    db.refresh(reservation)
    logger.info("Reservation %s created for room %s [%s, %s)", reservation.id, reservation.room_id, start, end)
    return reservation


def update_reservation(db: Session, reservation_id: str, payload: ReservationUpdate) -> Reservation:
    """Apply a partial update; a move in room or time re-runs the gate excluding itself."""
    reservation = get_reservation(db, reservation_id)
    changes = payload.model_dump(exclude_unset=True)

    room_id = changes.get("room_id") or reservation.room_id
    start, end = validate_interval(
        changes.get("start_time") or reservation.start_time,
        changes.get("end_time") or reservation.end_time,
    )

    moved = room_id != reservation.room_id or start != reservation.start_time or end != reservation.end_time
    if moved:
        _require_room(db, room_id)
        ensure_no_conflict(db, room_id, start, end, exclude_id=reservation.id)

    reservation.room_id = room_id
    reservation.start_time = start
    reservation.end_time = end
    if "title" in changes and changes["title"] is not None:
        reservation.title = changes["title"].strip()
    if "description" in changes:
        reservation.description = changes["description"] or None
    if "attendees" in changes:
        reservation.attendees = normalize_attendees(changes["attendees"] or [], reservation.organizer.email)
    if "google_event_id" in changes:
        reservation.google_event_id = changes["google_event_id"] or None

    db.commit()
    db.refresh(reservation)
    logger.info("Reservation %s updated", reservation.id)
    return reservation


def delete_reservation(db: Session, reservation_id: str) -> None:
    reservation = get_reservation(db, reservation_id)
    db.delete(reservation)
    db.commit()
    logger.info("Reservation %s deleted", reservation_id)
