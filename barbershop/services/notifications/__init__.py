from .gateway import BaseNotifier, NotificationResult, get_notifier
from .mailjet import MailjetNotifier
from .stub import StubNotifier

__all__ = [
    "BaseNotifier",
    "NotificationResult",
    "get_notifier",
    "MailjetNotifier",
    "StubNotifier",
]
