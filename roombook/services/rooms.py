"""Room catalogue. Writes invalidate the shared room listing cache."""

from __future__ import annotations

import logging
from datetime import date, tzinfo
from typing import Optional

from sqlalchemy.orm import Session

from roombook.cache import RoomCache
from roombook.errors import NotFoundError, ValidationError
from roombook.models import Room
from roombook.scheduling.availability import SlotAvailability, project_availability
from roombook.scheduling.slots import business_timezone, slot_grid
from roombook.schemas import RoomBase, RoomCreate, RoomOut
from roombook.services.reservations import reservations_for_day

logger = logging.getLogger(__name__)


def list_rooms(db: Session, cache: RoomCache) -> list[RoomOut]:
    def load():
        rooms = db.query(Room).order_by(Room.name.asc()).all()
        return [RoomOut.model_validate(r) for r in rooms]

    return cache.get_or_load(load)


def get_room(db: Session, room_id: str) -> Room:
    room = db.get(Room, room_id)
    if room is None:
        raise NotFoundError("Room not found.")
    return room


def create_room(db: Session, payload: RoomCreate, cache: RoomCache) -> Room:
    if payload.id and db.get(Room, payload.id) is not None:
        raise ValidationError("A room with this id already exists.")

    data = payload.model_dump(exclude_none=True)
    room = Room(**data)
    db.add(room)
    db.commit()
    db.refresh(room)
    cache.invalidate()
    logger.info("Room %s (%s) created", room.id, room.name)
    return room


def update_room(db: Session, room_id: str, payload: RoomBase, cache: RoomCache) -> Room:
    room = get_room(db, room_id)
    for field, value in payload.model_dump().items():
        setattr(room, field, value)
    db.commit()
    db.refresh(room)
    cache.invalidate()
    logger.info("Room %s updated", room.id)
    return room


def delete_room(db: Session, room_id: str, cache: RoomCache) -> None:
    """Delete the room together with all of its reservations."""
    room = get_room(db, room_id)
    db.delete(room)
    db.commit()
    cache.invalidate()
    logger.info("Room %s deleted", room_id)


def room_availability(db: Session, room_id: str, day: date, tz: Optional[tzinfo] = None) -> list[SlotAvailability]:
    get_room(db, room_id)
    tz = tz or business_timezone()
    return project_availability(slot_grid(day, tz), reservations_for_day(db, room_id, day, tz))
