"""
Reservation Notification Service

Sends the organizer a confirmation and the attendees an invitation, both
with the same .ics invite attached. Creates the video link first when the
booking does not carry an external event yet.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from roombook.integrations.ics import generate_ics
from roombook.integrations.mailer import Mailer, OutgoingEmail
from roombook.scheduling.slots import business_timezone
from roombook.services.reservations import normalize_attendees
from roombook.video_calls.base import MeetingRequest, VideoCallAdapter

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "Sala"


@dataclass
class ReservationNotice:
    title: str
    start: datetime
    end: datetime
    organizer_email: str
    organizer_name: Optional[str] = None
    description: Optional[str] = None
    room_name: Optional[str] = None
    location: Optional[str] = None
    attendees: list[str] = field(default_factory=list)
    video_link: Optional[str] = None
    google_event_id: Optional[str] = None
    calendar_id: Optional[str] = None
    organizer_body: Optional[str] = None
    attendees_body: Optional[str] = None


@dataclass
class NotificationResult:
    meet_link: str
    google_event_id: Optional[str]
    recipients: list[str]


def _local(dt: datetime) -> str:
    return dt.astimezone(business_timezone()).strftime("%d/%m/%Y, %H:%M:%S")


def _details_html(notice: ReservationNotice, location: str, meet_link: str) -> str:
    e = html.escape
    parts = [f"<p><strong>Título:</strong> {e(notice.title)}</p>"]
    if notice.room_name:
        parts.append(f"<p><strong>Sala:</strong> {e(notice.room_name)}</p>")
    parts += [
        f"<p><strong>Local:</strong> {e(location)}</p>",
        f"<p><strong>Início:</strong> {_local(notice.start)}</p>",
        f"<p><strong>Fim:</strong> {_local(notice.end)}</p>",
    ]
    if meet_link:
        parts.append(f'<p><strong>Link de videochamada:</strong> <a href="{e(meet_link)}">{e(meet_link)}</a></p>')
    parts.append("<p>Em anexo encontra o convite de calendário (.ics).</p>")
    return "\n".join(parts)


def organizer_html(notice: ReservationNotice, location: str, meet_link: str) -> str:
    greeting = html.escape(notice.organizer_name or notice.organizer_email)
    return (
        f"<p>Olá {greeting},</p>\n"
        "<p>A tua reserva foi confirmada com sucesso.</p>\n"
        + _details_html(notice, location, meet_link)
    )


def attendees_html(notice: ReservationNotice, location: str, meet_link: str) -> str:
    organizer = html.escape(notice.organizer_name or notice.organizer_email)
    return (
        "<p>Foi convidado para uma reunião.</p>\n"
        f"<p><strong>Organizado por:</strong> {organizer}</p>\n"
        + _details_html(notice, location, meet_link)
    )


def send_reservation_emails(notice: ReservationNotice, mailer: Mailer, adapter: VideoCallAdapter) -> NotificationResult:
    """
    Send organizer and attendee emails for a reservation.

    Raises:
        VideoCallError: if the video link had to be created and that failed
        MailDeliveryError: if a message could not be sent
    """
    attendees = normalize_attendees(notice.attendees, notice.organizer_email)
    location = notice.location or notice.room_name or DEFAULT_LOCATION

    meet_link = notice.video_link or ""
    google_event_id = notice.google_event_id or None

    if not google_event_id:
        created = adapter.create_meeting(MeetingRequest(
            title=notice.title,
            description=notice.description,
            location=location,
            start=notice.start,
            end=notice.end,
            attendees=attendees,
            organizer_email=notice.organizer_email,
            calendar_id=notice.calendar_id,
        ))
        meet_link = created.meeting_url or meet_link
        google_event_id = created.event_id or None

    invite = generate_ics(
        title=notice.title,
        description=notice.description,
        location=location,
        start=notice.start,
        end=notice.end,
        attendees=attendees,
        organizer=notice.organizer_email,
        video_link=meet_link or None,
    )

    mailer.send(OutgoingEmail(
        to=[notice.organizer_email],
        subject=f"Confirmação de Reserva: {notice.title}",
        html_body=notice.organizer_body or organizer_html(notice, location, meet_link),
        ics_attachment=invite,
    ))

    if attendees:
        mailer.send(OutgoingEmail(
            to=attendees,
            subject=f"Convite: {notice.title}",
            html_body=notice.attendees_body or attendees_html(notice, location, meet_link),
            ics_attachment=invite,
        ))

    recipients = [notice.organizer_email, *attendees]
    logger.info("Reservation emails for %r sent to %s", notice.title, recipients)
    return NotificationResult(meet_link=meet_link, google_event_id=google_event_id, recipients=recipients)
