import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, CheckConstraint, Enum, JSON, Text, TypeDecorator
from sqlalchemy.orm import relationship

from roombook.db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class UTCDateTime(TypeDecorator):
    """Stores naive UTC, hands back aware UTC datetimes.

    Naive values coming in are taken to already be UTC.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    USER = "user"
    GUEST = "guest"


class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, default=new_id)
    email = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    role = Column(Enum(UserRole, values_callable=lambda e: [m.value for m in e], name="user_role"),
                  nullable=False, default=UserRole.USER)
    created_at = Column(UTCDateTime, default=utcnow)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow)

    reservations = relationship("Reservation", back_populates="organizer", cascade="all, delete-orphan")


class Room(Base):
    __tablename__ = "rooms"
    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    description = Column(Text)
    capacity = Column(Integer, nullable=False)
    building = Column(String)
    floor = Column(Integer)
    amenities = Column(JSON, nullable=False, default=list)
    image_url = Column(String)
    calendar_id = Column(String)
    created_at = Column(UTCDateTime, default=utcnow)

    reservations = relationship("Reservation", back_populates="room", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("capacity > 0", name="room_capacity_positive"),
    )


class Reservation(Base):
    __tablename__ = "reservations"
    id = Column(String, primary_key=True, default=new_id)
    room_id = Column(String, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    start_time = Column(UTCDateTime, nullable=False)
    end_time = Column(UTCDateTime, nullable=False)
    attendees = Column(JSON, nullable=False, default=list)
    google_event_id = Column(String)
    created_at = Column(UTCDateTime, default=utcnow)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow)

    room = relationship("Room", back_populates="reservations")
    organizer = relationship("User", back_populates="reservations")

    # No overlap constraint here: the conflict gate checks before each write.
    __table_args__ = (
        CheckConstraint("end_time > start_time", name="reservation_time_valid"),
    )
