import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

# Only corporate accounts may sign in.
ALLOWED_LOGIN_DOMAINS = ("legendary.pt", "silver-lining.pt")


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./room_reservations.db"
    skip_db_init: bool = False
    google_client_id: str = ""
    google_client_secret: str = ""
    google_redirect_uri: str = ""
    google_refresh_token: str = ""
    gmail_sender: str = ""
    ms_graph_access_token: str = ""
    video_call_provider: str = "google_meet"
    business_timezone: str = "Europe/Lisbon"
    http_timeout_seconds: float = 20.0
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    load_dotenv()
    return Settings(
        database_url=os.getenv("DATABASE_URL", Settings.database_url),
        skip_db_init=os.getenv("SKIP_DB_INIT") == "1",
        google_client_id=os.getenv("GOOGLE_CLIENT_ID", ""),
        google_client_secret=os.getenv("GOOGLE_CLIENT_SECRET", ""),
        google_redirect_uri=os.getenv("GOOGLE_REDIRECT_URI", ""),
        google_refresh_token=os.getenv("GOOGLE_REFRESH_TOKEN", ""),
        gmail_sender=os.getenv("GMAIL_SENDER", ""),
        ms_graph_access_token=os.getenv("MS_GRAPH_ACCESS_TOKEN", ""),
        video_call_provider=os.getenv("VIDEO_CALL_PROVIDER", Settings.video_call_provider),
        business_timezone=os.getenv("BUSINESS_TIMEZONE", Settings.business_timezone),
        http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", Settings.http_timeout_seconds)),
        log_level=os.getenv("LOG_LEVEL", Settings.log_level).upper(),
    )
