"""FastAPI dependencies for shared collaborators; tests override these."""

from functools import lru_cache

from fastapi import Request

from roombook.cache import RoomCache
from roombook.config import get_settings
from roombook.integrations.google_auth import GoogleCredentials
from roombook.integrations.mailer import GmailMailer, Mailer
from roombook.video_calls.base import VideoCallAdapter
from roombook.video_calls.factory import get_adapter


def get_room_cache(request: Request) -> RoomCache:
    return request.app.state.room_cache


@lru_cache
def google_credentials() -> GoogleCredentials:
    return GoogleCredentials.from_settings(get_settings())


@lru_cache
def get_video_adapter() -> VideoCallAdapter:
    return get_adapter(settings=get_settings(), credentials=google_credentials())


@lru_cache
def get_mailer() -> Mailer:
    settings = get_settings()
    return GmailMailer(google_credentials(), settings.gmail_sender, timeout=settings.http_timeout_seconds)
