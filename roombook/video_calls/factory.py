"""Pick the video call adapter for a provider name."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from roombook.config import Settings, get_settings
from .base import VideoCallAdapter

if TYPE_CHECKING:
    from roombook.integrations.google_auth import GoogleCredentials


def get_adapter(
    provider: Optional[str] = None,
    settings: Optional[Settings] = None,
    credentials: Optional["GoogleCredentials"] = None,
) -> VideoCallAdapter:
    """
    Args:
        provider: "google_meet" or "microsoft_teams"; defaults to VIDEO_CALL_PROVIDER
        credentials: Google credentials to share with other Google clients

    Raises:
        ValueError: if provider is not supported
    """
    settings = settings or get_settings()
    provider = provider or settings.video_call_provider

    if provider == "google_meet":
        from roombook.integrations.google_auth import GoogleCredentials
        from .google_meet import GoogleMeetAdapter
        credentials = credentials or GoogleCredentials.from_settings(settings)
        return GoogleMeetAdapter(credentials, timeout=settings.http_timeout_seconds)
    elif provider == "microsoft_teams":
        from .microsoft_teams import TeamsAdapter
        return TeamsAdapter(settings.ms_graph_access_token, timeout=settings.http_timeout_seconds)
    else:
        raise ValueError(f"Unsupported provider: {provider}")
