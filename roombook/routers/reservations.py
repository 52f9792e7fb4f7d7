from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from roombook.db import get_db
from roombook.schemas import ReservationCreate, ReservationOut, ReservationUpdate
from roombook.services import reservations as reservation_service

router = APIRouter()


@router.get("", response_model=list[ReservationOut])
def list_reservations(
    room_id: str | None = Query(default=None, alias="roomId"),
    user_id: str | None = Query(default=None, alias="userId"),
    organizer_email: str | None = Query(default=None, alias="organizerEmail"),
    start: datetime | None = Query(default=None, alias="from"),
    end: datetime | None = Query(default=None, alias="to"),
    db: Session = Depends(get_db)
):
    """Reservations whose interval intersects [from, to), earliest first."""
    return reservation_service.list_reservations(
        db, room_id=room_id, user_id=user_id, organizer_email=organizer_email, start=start, end=end
    )


@router.post("", response_model=ReservationOut, status_code=201)
def create_reservation(body: ReservationCreate, db: Session = Depends(get_db)):
    """
    Create a reservation if the room is free for [startTime, endTime).
    Answers 409 with the colliding reservation otherwise.
    """
    return reservation_service.create_reservation(db, body)


@router.get("/{reservation_id}", response_model=ReservationOut)
def get_reservation(reservation_id: str, db: Session = Depends(get_db)):
    return reservation_service.get_reservation(db, reservation_id)


@router.put("/{reservation_id}", response_model=ReservationOut)
def update_reservation(reservation_id: str, body: ReservationUpdate, db: Session = Depends(get_db)):
    return reservation_service.update_reservation(db, reservation_id, body)


@router.delete("/{reservation_id}")
def delete_reservation(reservation_id: str, db: Session = Depends(get_db)):
    reservation_service.delete_reservation(db, reservation_id)
    return {"success": True}
