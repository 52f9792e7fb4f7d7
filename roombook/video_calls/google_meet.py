"""Google Meet links through a Google Calendar event with conference data."""

from __future__ import annotations

import logging
import uuid

import requests

from roombook.config import get_settings
from roombook.errors import UpstreamError
from roombook.integrations.google_auth import GoogleCredentials, provider_error_message
from roombook.timeutils import to_utc
from .base import MeetingLink, MeetingRequest, VideoCallAdapter, VideoCallError

logger = logging.getLogger(__name__)

EVENTS_URL = "https://www.googleapis.com/calendar/v3/calendars/{calendar_id}/events"


class GoogleMeetAdapter(VideoCallAdapter):
    def __init__(self, credentials: GoogleCredentials, calendar_id: str = "primary", timeout: float = 20.0) -> None:
        self.credentials = credentials
        self.calendar_id = calendar_id
        self.timeout = timeout

    def build_event(self, request: MeetingRequest) -> dict:
        tz = get_settings().business_timezone
        return {
            "summary": request.title,
            "description": request.description,
            "location": request.location,
            "start": {"dateTime": to_utc(request.start).isoformat(), "timeZone": tz},
            "end": {"dateTime": to_utc(request.end).isoformat(), "timeZone": tz},
            "attendees": [{"email": email} for email in request.attendees],
            "conferenceData": {
                "createRequest": {
                    "requestId": request.request_id or f"meet-{uuid.uuid4()}",
                    "conferenceSolutionKey": {"type": "hangoutsMeet"},
                }
            },
        }

    def create_meeting(self, request: MeetingRequest) -> MeetingLink:
        try:
            r = self.credentials.session.post(
                EVENTS_URL.format(calendar_id=request.calendar_id or self.calendar_id),
                headers=self.credentials.auth_headers(),
                params={"conferenceDataVersion": 1, "sendUpdates": "none"},
                json=self.build_event(request),
                timeout=self.timeout,
            )
            r.raise_for_status()
        except UpstreamError as e:
            raise VideoCallError(e.message) from e
        except requests.RequestException as e:
            message = provider_error_message(getattr(e, "response", None), "Could not create video call link.")
            logger.exception("Google Calendar event creation failed")
            raise VideoCallError(message) from e

        created = r.json()
        entry_points = (created.get("conferenceData") or {}).get("entryPoints") or []
        meet_link = created.get("hangoutLink") or next(
            (e.get("uri", "") for e in entry_points if e.get("entryPointType") == "video"), ""
        )
        logger.info("Created Google Calendar event %s", created.get("id"))
        return MeetingLink(meeting_url=meet_link, event_id=created.get("id", ""), provider_payload=created)

    def validate_config(self) -> None:
        try:
            self.credentials.access_token()
        except UpstreamError as e:
            raise VideoCallError(e.message) from e
