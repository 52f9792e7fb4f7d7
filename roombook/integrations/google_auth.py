"""Access tokens for Google APIs minted from a stored refresh token."""

from __future__ import annotations

import logging
import time
from threading import Lock
from typing import Optional

import requests

from roombook.config import Settings
from roombook.errors import UpstreamError

logger = logging.getLogger(__name__)

TOKEN_URL = "https://oauth2.googleapis.com/token"
# refresh a little before Google says the token dies
EXPIRY_MARGIN_SECONDS = 60


class GoogleCredentials:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        timeout: float = 20.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self.timeout = timeout
        self.session = session or requests.Session()
        self._lock = Lock()
        self._token: Optional[str] = None
        self._expires_at = 0.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleCredentials":
        return cls(
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            refresh_token=settings.google_refresh_token,
            timeout=settings.http_timeout_seconds,
        )

    def access_token(self) -> str:
        with self._lock:
            if self._token and time.monotonic() < self._expires_at:
                return self._token

            if not (self.client_id and self.client_secret and self.refresh_token):
                raise UpstreamError("Google OAuth credentials are not configured.")

            try:
                r = self.session.post(
                    TOKEN_URL,
                    data={
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "refresh_token": self.refresh_token,
                        "grant_type": "refresh_token",
                    },
                    timeout=self.timeout,
                )
                r.raise_for_status()
            except requests.RequestException as e:
                logger.exception("Google token refresh failed")
                raise UpstreamError(f"Google token refresh failed: {e}") from e

            payload = r.json()
            self._token = payload["access_token"]
            self._expires_at = time.monotonic() + int(payload.get("expires_in", 3600)) - EXPIRY_MARGIN_SECONDS
            return self._token

    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token()}"}


def provider_error_message(response: Optional[requests.Response], fallback: str) -> str:
    """Pull ``error.message`` out of a Google/Graph error body if there is one."""
    if response is None:
        return fallback
    try:
        err = response.json().get("error")
    except ValueError:
        return fallback
    if isinstance(err, dict) and err.get("message"):
        return err["message"]
    if isinstance(err, str):
        return err
    return fallback
