from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from roombook.cache import RoomCache
from roombook.db import get_db
from roombook.deps import get_room_cache
from roombook.schemas import AvailabilityOut, ReservationOut, RoomBase, RoomCreate, RoomOut, SlotOut
from roombook.services import rooms as room_service

router = APIRouter()


@router.get("", response_model=list[RoomOut])
def list_rooms(db: Session = Depends(get_db), cache: RoomCache = Depends(get_room_cache)):
    return room_service.list_rooms(db, cache)


@router.post("", response_model=RoomOut, status_code=201)
def create_room(body: RoomCreate, db: Session = Depends(get_db), cache: RoomCache = Depends(get_room_cache)):
    return room_service.create_room(db, body, cache)


@router.get("/{room_id}", response_model=RoomOut)
def get_room(room_id: str, db: Session = Depends(get_db)):
    return room_service.get_room(db, room_id)


@router.put("/{room_id}", response_model=RoomOut)
def update_room(room_id: str, body: RoomBase, db: Session = Depends(get_db), cache: RoomCache = Depends(get_room_cache)):
    return room_service.update_room(db, room_id, body, cache)


@router.delete("/{room_id}")
def delete_room(room_id: str, db: Session = Depends(get_db), cache: RoomCache = Depends(get_room_cache)):
    room_service.delete_room(db, room_id, cache)
    return {"ok": True}


@router.get("/{room_id}/availability", response_model=AvailabilityOut)
def room_availability(room_id: str, day: date = Query(alias="date"), db: Session = Depends(get_db)):
    """
    Slot grid for one business day with each slot marked free or taken:
      - isAvailable: no reservation overlaps the slot
      - reservation: the earliest reservation covering the slot, if any
      - durations: minutes bookable from a free slot without a collision
    """
    projected = room_service.room_availability(db, room_id, day)
    return AvailabilityOut(
        room_id=room_id,
        day=day,
        slots=[
            SlotOut(
                label=p.slot.label,
                start=p.slot.start,
                end=p.slot.end,
                is_available=p.is_available,
                reservation=ReservationOut.model_validate(p.reservation) if p.reservation else None,
                durations=list(p.durations),
            )
            for p in projected
        ],
    )
