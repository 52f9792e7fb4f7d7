import logging
import uuid

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from roombook.config import get_settings

logger = logging.getLogger(__name__)

SQLALCHEMY_DATABASE_URL = get_settings().database_url

connect_args = {"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

DEMO_ROOMS = [
    {"id": "room-1", "name": "Conference Room A", "capacity": 10,
     "amenities": ["Projector", "Whiteboard", "Video Conference"]},
    {"id": "room-2", "name": "Meeting Room B", "capacity": 6,
     "amenities": ["TV Screen", "Whiteboard"]},
    {"id": "room-3", "name": "Board Room", "capacity": 20,
     "amenities": ["Projector", "Video Conference", "Catering"]},
    {"id": "room-4", "name": "Focus Room", "capacity": 4,
     "amenities": ["Whiteboard", "Phone"]},
]


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    # Import models here to create tables
    from roombook.models import User, Room, UserRole
    Base.metadata.create_all(bind=engine)

    # Seed demo rooms and an admin if the database is empty
    db = SessionLocal()
    try:
        if not db.query(User).first():
            db.add(User(id=str(uuid.uuid4()), name="Demo Admin",
                        email="admin@legendary.pt", role=UserRole.ADMIN))
        if not db.query(Room).first():
            db.add_all(Room(**room) for room in DEMO_ROOMS)
            logger.info("Seeded %d demo rooms", len(DEMO_ROOMS))
        db.commit()
    finally:
        db.close()
