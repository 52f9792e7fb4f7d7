# tests/conftest.py
import os
import tempfile

# must be set before roombook reads its settings
os.environ["SKIP_DB_INIT"] = "1"
os.environ.setdefault("DATABASE_URL", f"sqlite:///{tempfile.gettempdir()}/roombook-test-default.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from roombook.cache import RoomCache
from roombook.db import Base, get_db
from roombook.deps import get_mailer, get_room_cache, get_video_adapter
from roombook.integrations.mailer import Mailer, MailDeliveryError
from roombook.main import app
from roombook.models import Reservation, Room, User, UserRole
from roombook.video_calls.base import MeetingLink, VideoCallAdapter, VideoCallError


class FakeVideoAdapter(VideoCallAdapter):
    def __init__(self):
        self.requests = []
        self.fail = False

    def create_meeting(self, request):
        self.requests.append(request)
        if self.fail:
            raise VideoCallError("calendar provider unavailable")
        n = len(self.requests)
        return MeetingLink(meeting_url=f"https://meet.google.com/fake-{n}", event_id=f"evt-{n}")


class FakeMailer(Mailer):
    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, email):
        if self.fail:
            raise MailDeliveryError("smtp relay down")
        self.sent.append(email)
        return f"msg-{len(self.sent)}"


@pytest.fixture(scope="function")
def test_db_session():
    # temp DB
    tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
    db_url = f"sqlite:///{tmp.name}"

    # test engine / Session
    engine = create_engine(db_url, connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
        os.unlink(tmp.name)


@pytest.fixture
def video_adapter():
    return FakeVideoAdapter()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def room_cache():
    return RoomCache()


@pytest.fixture(scope="function")
def client(test_db_session, video_adapter, mailer, room_cache):
    def override_get_db():
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_video_adapter] = lambda: video_adapter
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_room_cache] = lambda: room_cache

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


# —— Factories ——
@pytest.fixture
def make_user(test_db_session):
    def _make_user(user_id="u-1", name="User1", email="u1@legendary.pt", role=UserRole.USER):
        u = User(id=user_id, name=name, email=email, role=role)
        test_db_session.add(u)
        test_db_session.commit()
        return u
    return _make_user


@pytest.fixture
def make_room(test_db_session):
    def _make_room(room_id="r-1", name="Alpha", capacity=6, building=None, amenities=None):
        r = Room(id=room_id, name=name, capacity=capacity, building=building, amenities=amenities or [])
        test_db_session.add(r)
        test_db_session.commit()
        return r
    return _make_room


@pytest.fixture
def make_reservation(test_db_session, make_room, make_user):
    counter = {"n": 0}

    def _make_reservation(start, end, room_id=None, user_id=None, title="Existing", reservation_id=None):
        if room_id is None:
            room_id = (test_db_session.get(Room, "r-1") or make_room()).id
        if user_id is None:
            user_id = (test_db_session.get(User, "u-1") or make_user()).id
        counter["n"] += 1
        res = Reservation(
            id=reservation_id or f"res-{counter['n']}",
            room_id=room_id,
            user_id=user_id,
            title=title,
            start_time=start,
            end_time=end,
            attendees=[],
        )
        test_db_session.add(res)
        test_db_session.commit()
        return res
    return _make_reservation
