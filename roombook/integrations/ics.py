"""iCalendar (.ics) invite attached to reservation emails."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional

from roombook.timeutils import to_utc

PRODID = "-//Room Reservation System//PT"


def _ics_datetime(dt: datetime) -> str:
    return to_utc(dt).strftime("%Y%m%dT%H%M%SZ")


def _escape(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def generate_ics(
    title: str,
    start: datetime,
    end: datetime,
    organizer: str,
    location: str = "",
    description: Optional[str] = None,
    attendees: Iterable[str] = (),
    video_link: Optional[str] = None,
    uid: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """Build a METHOD:REQUEST calendar with a single VEVENT."""
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "METHOD:REQUEST",
        "BEGIN:VEVENT",
        f"UID:{uid or uuid.uuid4()}@roomreservation",
        f"DTSTAMP:{_ics_datetime(now or datetime.now(timezone.utc))}",
        f"DTSTART:{_ics_datetime(start)}",
        f"DTEND:{_ics_datetime(end)}",
        f"SUMMARY:{_escape(title)}",
        f"DESCRIPTION:{_escape(description or '')}",
        f"LOCATION:{_escape(location)}",
    ]
    if video_link:
        lines.append(f"URL:{video_link}")
    lines.append(f"ORGANIZER:mailto:{organizer}")
    lines.extend(f"ATTENDEE:mailto:{email}" for email in attendees)
    lines += [
        "STATUS:CONFIRMED",
        "SEQUENCE:0",
        "END:VEVENT",
        "END:VCALENDAR",
    ]
    return "\r\n".join(lines) + "\r\n"
