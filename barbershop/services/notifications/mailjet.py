from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from ...config import Settings
from ...db import models
from ..slot_grid import local_now
from .gateway import BaseNotifier, NotificationResult
from .templates import (
    EmailContent,
    build_admin_summary_email,
    build_confirmation_email,
    build_test_email,
)

logger = logging.getLogger(__name__)

MAILJET_SEND_URL = "https://api.mailjet.com/v3.1/send"


class MailjetNotifier(BaseNotifier):
    """Sends booking emails through the Mailjet v3.1 send API."""

    timeout = 10

    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None) -> None:
        super().__init__(settings)
        self.transport = transport

    def send_booking_confirmation(self, booking: models.Booking) -> NotificationResult:
        if not booking.email:
            return NotificationResult.skipped("No email provided", booking_id=booking.id)
        return self._send(
            booking.email,
            booking.customer_name,
            build_confirmation_email(booking),
            booking_id=booking.id,
        )

    def send_admin_summary(self, bookings: Sequence[models.Booking]) -> NotificationResult:
        recipient = self.settings.admin_email
        if not recipient:
            logger.warning("ADMIN_EMAIL is not configured; skipping admin notification")
            return NotificationResult.skipped("Admin email not configured")
        return self._send(recipient, "Admin", build_admin_summary_email(bookings))

    def send_test_email(self, recipient: str) -> NotificationResult:
        return self._send(recipient, "Test Recipient", build_test_email(local_now()))

    def _payload(self, to_email: str, to_name: str, content: EmailContent) -> dict[str, Any]:
        return {
            "Messages": [
                {
                    "From": {
                        "Email": self.settings.mailjet_from_email,
                        "Name": self.settings.mailjet_from_name,
                    },
                    "To": [{"Email": to_email, "Name": to_name}],
                    "Subject": content.subject,
                    "HTMLPart": content.html,
                }
            ]
        }

    def _send(
        self,
        to_email: str,
        to_name: str,
        content: EmailContent,
        booking_id: int | None = None,
    ) -> NotificationResult:
        if not self.settings.mailjet_configured:
            logger.warning("Mailjet credentials are not configured; skipping email")
            return NotificationResult.failed(
                reason="Mailjet not configured", recipient=to_email, booking_id=booking_id
            )

        auth = (self.settings.mailjet_api_key, self.settings.mailjet_secret_key)
        try:
            with httpx.Client(timeout=self.timeout, auth=auth, transport=self.transport) as client:
                response = client.post(MAILJET_SEND_URL, json=self._payload(to_email, to_name, content))
                response.raise_for_status()
                body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.exception("Failed to send email", extra={"email": to_email})
            return NotificationResult.failed(error=str(exc), recipient=to_email, booking_id=booking_id)

        messages = (body.get("Messages") if isinstance(body, dict) else None) or [{}]
        if messages[0].get("Status") != "success":
            logger.warning("Unexpected Mailjet response", extra={"email": to_email, "response": body})
            return NotificationResult.failed(
                reason="Unexpected response", recipient=to_email, booking_id=booking_id
            )
        recipients = messages[0].get("To") or [{}]
        message_id = recipients[0].get("MessageID")
        logger.info("Email sent", extra={"email": to_email, "message_id": message_id})
        return NotificationResult.delivered(
            to_email,
            message_id=str(message_id) if message_id is not None else None,
            booking_id=booking_id,
        )
