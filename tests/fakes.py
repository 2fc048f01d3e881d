from barbershop.config import get_settings
from barbershop.services.notifications import BaseNotifier, NotificationResult


class RecordingNotifier(BaseNotifier):
    def __init__(self, fail_admin: bool = False, raise_on_confirmation: bool = False) -> None:
        super().__init__(get_settings())
        self.confirmations = []
        self.summaries = []
        self.fail_admin = fail_admin
        self.raise_on_confirmation = raise_on_confirmation

    def send_booking_confirmation(self, booking):
        if self.raise_on_confirmation:
            raise RuntimeError("smtp down")
        self.confirmations.append(booking)
        return NotificationResult.delivered(booking.email, message_id=f"m-{booking.id}", booking_id=booking.id)

    def send_admin_summary(self, bookings):
        self.summaries.append(list(bookings))
        if self.fail_admin:
            return NotificationResult.failed(reason="Mailjet not configured")
        return NotificationResult.delivered("owner@example.com", message_id="admin-1")

    def send_test_email(self, recipient):
        return NotificationResult.delivered(recipient, message_id="test-1")
