"""Interface every video call adapter implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from roombook.errors import UpstreamError


@dataclass
class MeetingRequest:
    title: str
    start: datetime
    end: datetime
    organizer_email: str
    description: Optional[str] = None
    location: Optional[str] = None
    attendees: list[str] = field(default_factory=list)
    # idempotency key handed to the provider
    request_id: Optional[str] = None
    # calendar to create the event in; adapters without calendars ignore it
    calendar_id: Optional[str] = None


@dataclass
class MeetingLink:
    meeting_url: str
    event_id: str
    provider_payload: dict[str, Any] = field(default_factory=dict)


class VideoCallAdapter(ABC):
    @abstractmethod
    def create_meeting(self, request: MeetingRequest) -> MeetingLink:
        """
        Create the external event and return its video link.

        Raises:
            VideoCallError: if the provider call fails
        """

    def validate_config(self) -> None:
        """Raise VideoCallError if the adapter cannot reach its provider."""


class VideoCallError(UpstreamError):
    """Creating the external meeting failed."""
