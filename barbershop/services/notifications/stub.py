from __future__ import annotations

import logging
from typing import Sequence

from ...db import models
from .gateway import BaseNotifier, NotificationResult

logger = logging.getLogger(__name__)


class StubNotifier(BaseNotifier):
    """Notifier that logs instead of sending and reports every message as sent."""

    def send_booking_confirmation(self, booking: models.Booking) -> NotificationResult:
        logger.info("Stub confirmation", extra={"booking_id": booking.id, "email": booking.email})
        return NotificationResult.delivered(
            booking.email or "", message_id=f"stub-{booking.id}", booking_id=booking.id
        )

    def send_admin_summary(self, bookings: Sequence[models.Booking]) -> NotificationResult:
        recipient = self.settings.admin_email or "admin"
        logger.info("Stub admin summary", extra={"count": len(bookings), "email": recipient})
        return NotificationResult.delivered(recipient, message_id="stub-admin")

    def send_test_email(self, recipient: str) -> NotificationResult:
        logger.info("Stub test email", extra={"email": recipient})
        return NotificationResult.delivered(recipient, message_id="stub-test")
