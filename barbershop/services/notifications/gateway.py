from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from ...config import Settings
from ...db import models


@dataclass(slots=True)
class NotificationResult:
    sent: bool
    status: str
    recipient: str | None = None
    booking_id: int | None = None
    message_id: str | None = None
    reason: str | None = None
    error: str | None = None

    @classmethod
    def delivered(cls, recipient: str, message_id: str | None = None, **kwargs) -> "NotificationResult":
        return cls(sent=True, status="sent", recipient=recipient, message_id=message_id, **kwargs)

    @classmethod
    def failed(cls, *, reason: str | None = None, error: str | None = None, **kwargs) -> "NotificationResult":
        return cls(sent=False, status="failed", reason=reason, error=error, **kwargs)

    @classmethod
    def skipped(cls, reason: str, **kwargs) -> "NotificationResult":
        return cls(sent=False, status="skipped", reason=reason, **kwargs)


class BaseNotifier(ABC):
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @abstractmethod
    def send_booking_confirmation(self, booking: models.Booking) -> NotificationResult:
        raise NotImplementedError

    @abstractmethod
    def send_admin_summary(self, bookings: Sequence[models.Booking]) -> NotificationResult:
        raise NotImplementedError

    @abstractmethod
    def send_test_email(self, recipient: str) -> NotificationResult:
        """Send a fixed message to ``recipient`` to check delivery end to end."""
        raise NotImplementedError


def get_notifier(settings: Settings) -> BaseNotifier:
    if settings.notification_provider == "mailjet":
        from .mailjet import MailjetNotifier

        return MailjetNotifier(settings)
    if settings.notification_provider == "stub":
        from .stub import StubNotifier

        return StubNotifier(settings)
    raise ValueError(f"Unsupported notification provider {settings.notification_provider}")
