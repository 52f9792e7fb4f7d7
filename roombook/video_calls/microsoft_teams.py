"""Microsoft Teams links through a Microsoft Graph calendar event."""

from __future__ import annotations

import logging

import requests

from roombook.config import get_settings
from roombook.integrations.google_auth import provider_error_message
from roombook.timeutils import to_utc
from .base import MeetingLink, MeetingRequest, VideoCallAdapter, VideoCallError

logger = logging.getLogger(__name__)

GRAPH_EVENTS_URL = "https://graph.microsoft.com/v1.0/me/events"


class TeamsAdapter(VideoCallAdapter):
    def __init__(self, access_token: str, timeout: float = 20.0, session: requests.Session | None = None) -> None:
        self.access_token = access_token
        self.timeout = timeout
        self.session = session or requests.Session()

    def build_event(self, request: MeetingRequest) -> dict:
        # Graph wants a wall-clock dateTime plus a zone name
        return {
            "subject": request.title,
            "body": {"contentType": "text", "content": request.description or ""},
            "location": {"displayName": request.location or ""},
            "start": {"dateTime": to_utc(request.start).strftime("%Y-%m-%dT%H:%M:%S"), "timeZone": "UTC"},
            "end": {"dateTime": to_utc(request.end).strftime("%Y-%m-%dT%H:%M:%S"), "timeZone": "UTC"},
            "attendees": [
                {"emailAddress": {"address": email}, "type": "required"} for email in request.attendees
            ],
            "isOnlineMeeting": True,
            "onlineMeetingProvider": "teamsForBusiness",
            "transactionId": request.request_id,
        }

    def create_meeting(self, request: MeetingRequest) -> MeetingLink:
        self.validate_config()
        try:
            r = self.session.post(
                GRAPH_EVENTS_URL,
                headers={"Authorization": f"Bearer {self.access_token}", "Prefer": f'outlook.timezone="{get_settings().business_timezone}"'},
                json=self.build_event(request),
                timeout=self.timeout,
            )
            r.raise_for_status()
        except requests.RequestException as e:
            message = provider_error_message(getattr(e, "response", None), "Could not create Teams meeting.")
            logger.exception("Microsoft Graph event creation failed")
            raise VideoCallError(message) from e

        created = r.json()
        join_url = (created.get("onlineMeeting") or {}).get("joinUrl", "")
        logger.info("Created Microsoft Graph event %s", created.get("id"))
        return MeetingLink(meeting_url=join_url, event_id=created.get("id", ""), provider_payload=created)

    def validate_config(self) -> None:
        if not self.access_token:
            raise VideoCallError("MS_GRAPH_ACCESS_TOKEN is not configured.")
