"""Error taxonomy shared by the services and the HTTP layer."""

from __future__ import annotations

from typing import Any


class RoomBookingError(Exception):
    """Base class. ``status_code`` is the HTTP status the API answers with."""

    status_code = 500

    def __init__(self, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, **self.extra}


class ValidationError(RoomBookingError):
    status_code = 400


class InvalidInterval(ValidationError):
    """End time is not strictly after start time."""


class AuthorizationError(RoomBookingError):
    status_code = 403


class NotFoundError(RoomBookingError):
    status_code = 404


class ReservationConflict(RoomBookingError):
    """The proposed interval overlaps an existing reservation of the room."""

    status_code = 409

    def __init__(self, conflict: dict[str, Any], message: str = "Room is already reserved for the selected interval.") -> None:
        super().__init__(message, conflict=conflict)
        self.conflict = conflict


class UpstreamError(RoomBookingError):
    """An external calendar or mail provider call failed."""

    status_code = 500
