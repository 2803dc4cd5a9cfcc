"""
services/notifications.py

New-listing email notifications. A notifier is handed to the inventory routes
through a FastAPI dependency and runs as a background task after the response
is sent; delivery problems are logged and never reach the client.
"""

import html
import logging
import smtplib
from email.message import EmailMessage
from typing import List, Protocol

from pydantic import BaseModel

from app.core.config import Settings

logger = logging.getLogger(__name__)


class PropertyNotice(BaseModel):
    """Plain snapshot of a new listing (the DB session is gone by send time)."""
    owner_name: str
    owner_email: str
    address: str
    nearby_landmark: str
    description: str
    rent: int
    bhk: int
    bathroom: int
    floor: int
    total_floors: int
    gender: str
    furnishing: str
    restriction: str
    status: str
    amenities: List[str] = []


class PropertyNotifier(Protocol):
    def notify_new_property(self, notice: PropertyNotice) -> None:
        ...


def render_property_email(notice: PropertyNotice) -> str:
    e = html.escape
    amenities = ", ".join(notice.amenities) if notice.amenities else "None"
    return (
        "<h2>New Property Details</h2>"
        f"<p><strong>Address:</strong> {e(notice.address)}</p>"
        f"<p><strong>Description:</strong> {e(notice.description)}</p>"
        f"<p><strong>Rent:</strong> &#8377;{notice.rent}</p>"
        f"<p><strong>Near:</strong> {e(notice.nearby_landmark)}</p>"
        f"<p><strong>BHK:</strong> {notice.bhk}</p>"
        f"<p><strong>Bathrooms:</strong> {notice.bathroom}</p>"
        f"<p><strong>Floor:</strong> {notice.floor} (Total: {notice.total_floors})</p>"
        f"<p><strong>Gender:</strong> {e(notice.gender)}</p>"
        f"<p><strong>Furnishing:</strong> {e(notice.furnishing)}</p>"
        f"<p><strong>Restriction:</strong> {e(notice.restriction)}</p>"
        f"<p><strong>Status:</strong> {e(notice.status)}</p>"
        f"<p><strong>Amenities:</strong> {e(amenities)}</p>"
        f"<p><strong>Submitted By:</strong> {e(notice.owner_name)} ({e(notice.owner_email)})</p>"
    )


class LoggingPropertyNotifier:
    """Used when SMTP is not configured."""

    def notify_new_property(self, notice: PropertyNotice) -> None:
        logger.info(
            "New property listed by %s: %s (rent %s)",
            notice.owner_email, notice.address, notice.rent,
        )


class SmtpPropertyNotifier:
    def __init__(self, host: str, port: int, sender: str, recipient: str,
                 username: str = "", password: str = "", use_tls: bool = True, timeout: float = 10.0):
        self.host = host
        self.port = port
        self.sender = sender
        self.recipient = recipient
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def build_message(self, notice: PropertyNotice) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = "New Property Registered"
        msg["From"] = self.sender
        msg["To"] = self.recipient
        msg.set_content(f"New property at {notice.address} listed by {notice.owner_name}.")
        msg.add_alternative(render_property_email(notice), subtype="html")
        return msg

    def notify_new_property(self, notice: PropertyNotice) -> None:
        msg = self.build_message(notice)
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password)
            smtp.send_message(msg)
        logger.info("New-property email sent to %s", self.recipient)


def build_notifier(settings: Settings) -> PropertyNotifier:
    if settings.SMTP_HOST and settings.NOTIFY_EMAIL_TO:
        return SmtpPropertyNotifier(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            sender=settings.NOTIFY_EMAIL_FROM,
            recipient=settings.NOTIFY_EMAIL_TO,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            use_tls=settings.SMTP_USE_TLS,
        )
    return LoggingPropertyNotifier()


def send_property_notification(notifier: PropertyNotifier, notice: PropertyNotice) -> None:
    """Background-task entry point; must never raise."""
    try:
        notifier.notify_new_property(notice)
    except Exception as e:
        logger.error("Error sending new-property email for %s: %s", notice.address, e)
