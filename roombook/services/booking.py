"""
Booking Workflow

Runs one booking attempt end to end:

    validate -> local conflict check -> meet link -> durable write -> emails

Nothing is persisted before the write step. A failed meet link aborts the
attempt; a failed email after the write leaves the reservation in place and
is reported back as a warning.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Any, Optional

from sqlalchemy.orm import Session

from roombook.errors import NotFoundError, ReservationConflict, UpstreamError, ValidationError
from roombook.integrations.mailer import Mailer
from roombook.models import Reservation, Room
from roombook.scheduling.conflicts import describe_conflict, find_conflicts, validate_interval
from roombook.scheduling.slots import business_timezone
from roombook.schemas import ReservationCreate, require_email
from roombook.services.notifications import ReservationNotice, send_reservation_emails
from roombook.services.reservations import create_reservation, reservations_for_day
from roombook.video_calls.base import MeetingLink, MeetingRequest, VideoCallAdapter, VideoCallError

logger = logging.getLogger(__name__)

EMAIL_FAILED_WARNING = "Reservation saved, but the notification emails could not be sent."


@dataclass
class BookingDraft:
    room_id: str
    title: str
    start: datetime
    end: datetime
    organizer_email: str
    organizer_name: Optional[str] = None
    organizer_id: Optional[str] = None
    description: Optional[str] = None
    attendees: list[str] = field(default_factory=list)


@dataclass
class BookingOutcome:
    reservation: Reservation
    meet_link: str
    google_event_id: Optional[str]
    notification_error: Optional[str] = None

    @property
    def emails_sent(self) -> bool:
        return self.notification_error is None


def meet_key(draft: BookingDraft) -> str:
    """Stable id for the inputs that define an external meeting."""
    start, end = validate_interval(draft.start, draft.end)
    payload = json.dumps(
        {
            "roomId": draft.room_id,
            "start": start.isoformat(),
            "end": end.isoformat(),
            "title": draft.title.strip(),
            "organizer": draft.organizer_email.strip().lower(),
        },
        sort_keys=True,
    )
    return "req-" + hashlib.sha256(payload.encode("utf-8")).hexdigest()[:16]


class MeetLinkCoordinator:
    """One external meeting per distinct meet key.

    Re-requesting the current key is a no-op; a new key cancels the
    superseded request.
    """

    def __init__(self, adapter: VideoCallAdapter) -> None:
        self.adapter = adapter
        self._last_key: Optional[str] = None
        self._last_link: Optional[MeetingLink] = None
        self._inflight_key: Optional[str] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def request(self, key: str, meeting: MeetingRequest) -> None:
        if key == self._last_key or (key == self._inflight_key and self.pending):
            return
        self.cancel()
        self._inflight_key = key
        self._task = asyncio.get_running_loop().create_task(self._create(key, meeting))

    async def _create(self, key: str, meeting: MeetingRequest) -> MeetingLink:
        # the provider call blocks; a cancelled task just stops waiting on it
        link = await asyncio.to_thread(self.adapter.create_meeting, meeting)
        if self._inflight_key == key:
            self._last_key, self._last_link = key, link
            self._inflight_key = None
        return link

    async def wait(self, key: str) -> MeetingLink:
        if key == self._last_key and self._last_link is not None:
            return self._last_link
        if key != self._inflight_key or self._task is None:
            raise RuntimeError(f"No meet link requested for {key}")
        task = self._task
        try:
            return await task
        except VideoCallError:
            self._inflight_key, self._task = None, None
            raise

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self._inflight_key = None

    def reset(self) -> None:
        self.cancel()
        self._last_key, self._last_link = None, None


class BookingWorkflow:
    def __init__(
        self,
        db: Session,
        adapter: VideoCallAdapter,
        mailer: Mailer,
        tz: Optional[tzinfo] = None,
    ) -> None:
        self.db = db
        self.mailer = mailer
        self.tz = tz or business_timezone()
        self.links = MeetLinkCoordinator(adapter)
        self.draft: Optional[BookingDraft] = None
        self._day_key: Optional[tuple[str, date]] = None
        self._day_reservations: list[Reservation] = []

    # ── local state ──────────────────────────────────────────────────

    def load_day(self, room_id: str, day: date) -> list[Reservation]:
        """Cache the room's reservations for ``day``; reused until the day or room changes."""
        if self._day_key != (room_id, day):
            self._day_reservations = reservations_for_day(self.db, room_id, day, self.tz)
            self._day_key = (room_id, day)
        return self._day_reservations

    def validate(self, draft: BookingDraft) -> tuple[datetime, datetime]:
        missing = [
            name for name, value in (
                ("roomId", draft.room_id),
                ("title", (draft.title or "").strip()),
                ("organizerEmail", (draft.organizer_email or "").strip()),
                ("startTime", draft.start),
                ("endTime", draft.end),
            ) if not value
        ]
        if missing:
            raise ValidationError("Required fields missing.", fields=missing)
        try:
            require_email(draft.organizer_email)
        except ValueError as e:
            raise ValidationError(f"organizerEmail {e}") from e
        return validate_interval(draft.start, draft.end)

    def local_conflict(self, draft: BookingDraft) -> Optional[Any]:
        start, end = validate_interval(draft.start, draft.end)
        day = start.astimezone(self.tz).date()
        conflicts = find_conflicts(start, end, self.load_day(draft.room_id, day))
        return conflicts[0] if conflicts else None

    def room(self, room_id: str) -> Room:
        room = self.db.get(Room, room_id)
        if room is None:
            raise NotFoundError("Room not found.")
        return room

    def _meeting_request(self, draft: BookingDraft, room: Room, key: str) -> MeetingRequest:
        return MeetingRequest(
            title=draft.title.strip(),
            description=draft.description,
            location=self._location(room),
            start=draft.start,
            end=draft.end,
            organizer_email=draft.organizer_email,
            request_id=key,
            calendar_id=room.calendar_id or None,
        )

    @staticmethod
    def _location(room: Room) -> str:
        if room.building:
            return f"{room.building} - {room.name}"
        return room.name

    def _notify(self, reservation: Reservation, draft: BookingDraft, link: MeetingLink) -> None:
        room = reservation.room
        send_reservation_emails(
            ReservationNotice(
                title=reservation.title,
                description=reservation.description,
                room_name=room.name,
                location=self._location(room),
                start=reservation.start_time,
                end=reservation.end_time,
                attendees=list(reservation.attendees or []),
                organizer_email=draft.organizer_email,
                organizer_name=draft.organizer_name,
                video_link=link.meeting_url,
                google_event_id=link.event_id or None,
                calendar_id=room.calendar_id or None,
            ),
            self.mailer,
            self.links.adapter,
        )

    # ── steps ────────────────────────────────────────────────────────

    def update_draft(self, draft: BookingDraft) -> None:
        """Record the draft and start the meet link early when it looks bookable."""
        self.draft = draft
        self.validate(draft)
        room = self.room(draft.room_id)
        if self.local_conflict(draft) is not None:
            return
        key = meet_key(draft)
        self.links.request(key, self._meeting_request(draft, room, key))

    async def confirm(self, draft: Optional[BookingDraft] = None) -> BookingOutcome:
        """
        Run the booking to completion.

        Database and mail calls block, so they run in worker threads.

        Raises:
            ValidationError: bad or missing input, nothing was sent anywhere
            NotFoundError: unknown room, nothing was sent anywhere
            ReservationConflict: local or server-side overlap
            VideoCallError: the meet link could not be created
        """
        draft = draft or self.draft
        if draft is None:
            raise ValidationError("Nothing to book.")
        self.draft = draft

        self.validate(draft)
        room = await asyncio.to_thread(self.room, draft.room_id)

        conflict = await asyncio.to_thread(self.local_conflict, draft)
        if conflict is not None:
            raise ReservationConflict(describe_conflict(conflict))

        key = meet_key(draft)
        self.links.request(key, self._meeting_request(draft, room, key))
        link = await self.links.wait(key)

        reservation = await asyncio.to_thread(create_reservation, self.db, ReservationCreate(
            room_id=draft.room_id,
            title=draft.title,
            description=draft.description,
            start_time=draft.start,
            end_time=draft.end,
            organizer_id=draft.organizer_id,
            organizer_email=draft.organizer_email,
            organizer_name=draft.organizer_name,
            attendees=draft.attendees,
            google_event_id=link.event_id or None,
        ))
        self._day_key = None

        outcome = BookingOutcome(
            reservation=reservation,
            meet_link=link.meeting_url,
            google_event_id=link.event_id or None,
        )

        try:
            await asyncio.to_thread(self._notify, reservation, draft, link)
        except UpstreamError as e:
            logger.warning("Reservation %s saved but emails failed: %s", reservation.id, e.message)
            outcome.notification_error = EMAIL_FAILED_WARNING

        self.draft = None
        self.links.reset()
        return outcome

    def abort(self) -> None:
        """Drop the draft and any in-flight meet link request."""
        self.links.cancel()
        self.draft = None
        self._day_key = None
        self._day_reservations = []
