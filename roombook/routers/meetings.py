import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from roombook.deps import get_mailer, get_video_adapter
from roombook.errors import UpstreamError
from roombook.integrations.mailer import Mailer
from roombook.scheduling.conflicts import validate_interval
from roombook.schemas import MeetLinkRequest, MeetLinkResponse, ReservationEmailRequest, ReservationEmailResponse
from roombook.services.notifications import ReservationNotice, send_reservation_emails
from roombook.video_calls.base import MeetingRequest, VideoCallAdapter

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/create-meet-link", response_model=MeetLinkResponse)
def create_meet_link(body: MeetLinkRequest, adapter: VideoCallAdapter = Depends(get_video_adapter)):
    start, end = validate_interval(body.start_time, body.end_time)
    try:
        link = adapter.create_meeting(MeetingRequest(
            title=body.title,
            description=body.description,
            location=body.location,
            start=start,
            end=end,
            attendees=body.attendees,
            organizer_email=body.organizer_email,
            request_id=body.request_id,
        ))
    except UpstreamError as e:
        logger.error("create-meet-link failed: %s", e.message)
        return JSONResponse(status_code=500, content={"ok": False, "error": e.message})

    return MeetLinkResponse(meet_link=link.meeting_url or "", google_event_id=link.event_id or None, event_id=link.event_id or None)


@router.post("/reservation-email", response_model=ReservationEmailResponse)
def reservation_email(
    body: ReservationEmailRequest,
    adapter: VideoCallAdapter = Depends(get_video_adapter),
    mailer: Mailer = Depends(get_mailer),
):
    """
    Email the organizer and attendees with a calendar invite attached.
    Creates the meet link first when no googleEventId is given.
    """
    start, end = validate_interval(body.start_time, body.end_time)
    notice = ReservationNotice(
        title=body.title,
        description=body.description,
        room_name=body.room_name,
        location=body.location,
        start=start,
        end=end,
        attendees=body.attendees,
        organizer_email=body.organizer_email,
        organizer_name=body.organizer_name,
        video_link=body.video_link,
        google_event_id=body.google_event_id,
        calendar_id=body.room_calendar_id,
        organizer_body=body.organizer_body,
        attendees_body=body.attendees_body,
    )
    try:
        result = send_reservation_emails(notice, mailer, adapter)
    except UpstreamError as e:
        logger.error("reservation-email failed: %s", e.message)
        return JSONResponse(status_code=500, content={"ok": False, "error": "Could not send reservation emails."})

    return ReservationEmailResponse(meet_link=result.meet_link, google_event_id=result.google_event_id)
