from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from roombook.db import get_db
from roombook.deps import get_mailer, get_video_adapter
from roombook.integrations.mailer import Mailer
from roombook.schemas import BookingRequest, BookingResponse, ReservationOut
from roombook.services.booking import BookingDraft, BookingWorkflow
from roombook.video_calls.base import VideoCallAdapter

router = APIRouter()


@router.post("", response_model=BookingResponse, status_code=201)
async def book_room(
    body: BookingRequest,
    db: Session = Depends(get_db),
    adapter: VideoCallAdapter = Depends(get_video_adapter),
    mailer: Mailer = Depends(get_mailer),
):
    """
    Full booking: conflict check, meet link, reservation write, emails.
    A failed email still answers 201, with emailsSent=false and a warning.
    """
    workflow = BookingWorkflow(db, adapter, mailer)
    outcome = await workflow.confirm(BookingDraft(
        room_id=body.room_id,
        title=body.title,
        description=body.description,
        start=body.start_time,
        end=body.end_time,
        organizer_email=body.organizer_email,
        organizer_name=body.organizer_name,
        organizer_id=body.organizer_id,
        attendees=body.attendees,
    ))
    return BookingResponse(
        reservation=ReservationOut.model_validate(outcome.reservation),
        meet_link=outcome.meet_link,
        google_event_id=outcome.google_event_id,
        emails_sent=outcome.emails_sent,
        warning=outcome.notification_error,
    )
