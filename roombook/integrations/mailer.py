"""Outgoing mail through the Gmail API."""

from __future__ import annotations

import base64
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional

import requests

from roombook.errors import UpstreamError
from .google_auth import GoogleCredentials, provider_error_message

logger = logging.getLogger(__name__)

GMAIL_SEND_URL = "https://gmail.googleapis.com/gmail/v1/users/me/messages/send"
ICS_FILENAME = "reserva.ics"


class MailDeliveryError(UpstreamError):
    """The mail provider refused or failed to send a message."""


@dataclass
class OutgoingEmail:
    to: list[str]
    subject: str
    html_body: str
    ics_attachment: Optional[str] = None


def build_mime(email: OutgoingEmail, sender: str) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = ", ".join(email.to)
    msg["Subject"] = email.subject
    msg.set_content(email.html_body, subtype="html")
    if email.ics_attachment:
        msg.add_attachment(
            email.ics_attachment.encode("utf-8"),
            maintype="text",
            subtype="calendar",
            filename=ICS_FILENAME,
            params={"method": "REQUEST", "charset": "UTF-8"},
        )
    return msg


class Mailer(ABC):
    @abstractmethod
    def send(self, email: OutgoingEmail) -> str:
        """Send ``email`` and return the provider message id.

        Raises:
            MailDeliveryError: if delivery fails
        """


class GmailMailer(Mailer):
    def __init__(self, credentials: GoogleCredentials, sender: str, timeout: float = 20.0) -> None:
        self.credentials = credentials
        self.sender = sender
        self.timeout = timeout

    def send(self, email: OutgoingEmail) -> str:
        if not self.sender:
            raise MailDeliveryError("GMAIL_SENDER is not configured.")

        raw = base64.urlsafe_b64encode(build_mime(email, self.sender).as_bytes()).decode("ascii").rstrip("=")
        try:
            r = self.credentials.session.post(
                GMAIL_SEND_URL,
                headers=self.credentials.auth_headers(),
                json={"raw": raw},
                timeout=self.timeout,
            )
            r.raise_for_status()
        except requests.RequestException as e:
            message = provider_error_message(getattr(e, "response", None), str(e))
            logger.exception("Gmail send failed for %s", email.to)
            raise MailDeliveryError(message) from e

        message_id = r.json().get("id", "")
        logger.info("Email sent to %s (gmail id %s)", email.to, message_id)
        return message_id
