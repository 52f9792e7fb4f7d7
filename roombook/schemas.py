"""Request and response bodies. Field names are camelCase on the wire."""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

from roombook.models import UserRole
from roombook.timeutils import utc_iso_z


UTCDatetime = Annotated[datetime, PlainSerializer(utc_iso_z, return_type=str, when_used="json")]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def require_email(value: str) -> str:
    value = value.strip()
    local, _, domain = value.partition("@")
    if not local or not domain:
        raise ValueError("must be an email address")
    return value


EmailAddress = Annotated[str, AfterValidator(require_email)]


# ── Rooms ─────────────────────────────────────────────────────────────


class RoomBase(CamelModel):
    name: str = Field(..., min_length=1)
    capacity: int = Field(..., gt=0)
    amenities: list[str] = Field(default_factory=list)
    description: Optional[str] = None
    building: Optional[str] = None
    floor: Optional[int] = None
    image_url: Optional[str] = None
    calendar_id: Optional[str] = None

    @field_validator("amenities")
    @classmethod
    def amenities_as_set(cls, v: list[str]) -> list[str]:
        return sorted({a.strip() for a in v if a and a.strip()})


class RoomCreate(RoomBase):
    id: Optional[str] = None


class RoomOut(RoomBase):
    id: str


# ── Reservations ──────────────────────────────────────────────────────


class ReservationCreate(CamelModel):
    room_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    organizer_id: Optional[str] = None
    organizer_email: EmailAddress
    organizer_name: Optional[str] = None
    attendees: list[str] = Field(default_factory=list)
    google_event_id: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title is required")
        return v.strip()


class ReservationUpdate(CamelModel):
    room_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    attendees: Optional[list[str]] = None
    google_event_id: Optional[str] = None


class ReservationOut(CamelModel):
    id: str
    room_id: str
    user_id: str
    title: str
    description: Optional[str] = None
    start_time: UTCDatetime
    end_time: UTCDatetime
    attendees: list[str] = Field(default_factory=list)
    google_event_id: Optional[str] = None


# ── Availability ──────────────────────────────────────────────────────


class SlotOut(CamelModel):
    label: str
    start: UTCDatetime
    end: UTCDatetime
    is_available: bool
    reservation: Optional[ReservationOut] = None
    durations: list[int] = Field(default_factory=list)


class AvailabilityOut(CamelModel):
    room_id: str
    day: date
    slots: list[SlotOut]


# ── Users ─────────────────────────────────────────────────────────────


class UserCreate(CamelModel):
    email: EmailAddress
    name: Optional[str] = None
    role: Optional[str] = None


class UserUpdate(CamelModel):
    name: Optional[str] = None
    role: Optional[UserRole] = None


class UserOut(CamelModel):
    id: str
    email: str
    name: str
    role: UserRole
    created_at: Optional[UTCDatetime] = None
    updated_at: Optional[UTCDatetime] = None


class LoginRequest(CamelModel):
    email: EmailAddress
    name: Optional[str] = None


# ── Meet links and email ──────────────────────────────────────────────


class MeetLinkRequest(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    location: Optional[str] = None
    start_time: datetime
    end_time: datetime
    attendees: list[str] = Field(default_factory=list)
    organizer_email: EmailAddress
    request_id: Optional[str] = None


class MeetLinkResponse(CamelModel):
    ok: bool = True
    meet_link: str = ""
    google_event_id: Optional[str] = None
    event_id: Optional[str] = None


class ReservationEmailRequest(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    room_name: Optional[str] = None
    location: Optional[str] = None
    start_time: datetime
    end_time: datetime
    attendees: list[str] = Field(default_factory=list)
    organizer_email: EmailAddress
    organizer_name: Optional[str] = None
    video_link: Optional[str] = None
    google_event_id: Optional[str] = None
    room_calendar_id: Optional[str] = None
    organizer_body: Optional[str] = None
    attendees_body: Optional[str] = None


class ReservationEmailResponse(CamelModel):
    ok: bool = True
    meet_link: str = ""
    google_event_id: Optional[str] = None


# ── Booking workflow ──────────────────────────────────────────────────


class BookingRequest(CamelModel):
    room_id: str = Field(..., min_length=1)
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    organizer_email: str
    organizer_name: Optional[str] = None
    organizer_id: Optional[str] = None
    attendees: list[str] = Field(default_factory=list)


class BookingResponse(CamelModel):
    reservation: ReservationOut
    meet_link: str = ""
    google_event_id: Optional[str] = None
    emails_sent: bool
    warning: Optional[str] = None
