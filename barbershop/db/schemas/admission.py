from typing import Any

from pydantic import BaseModel

from .booking import Booking


class RejectedBooking(BaseModel):
    index: int
    customer_name: str
    kind: str
    message: str
    fields: list[str] = []
    provided: Any = None
    conflicts_with: int | None = None

    class Config:
        from_attributes = True


class NotificationOutcome(BaseModel):
    sent: bool
    status: str
    recipient: str | None = None
    booking_id: int | None = None
    message_id: str | None = None
    reason: str | None = None
    error: str | None = None

    class Config:
        from_attributes = True


class EmailResults(BaseModel):
    customer_emails: list[NotificationOutcome] = []
    admin_email: NotificationOutcome | None = None


class AdmissionSummary(BaseModel):
    total: int
    successful: int
    failed: int
    emails_sent: int
    admin_notified: bool


class BulkBookingResponse(BaseModel):
    success: bool = True
    message: str
    bookings: list[Booking]
    conflicts: list[RejectedBooking] = []
    email_results: EmailResults
    summary: AdmissionSummary


class SingleBookingResponse(BaseModel):
    success: bool = True
    message: str = "Booking created successfully"
    booking: Booking
    email_sent: bool
    admin_notified: bool
    email_details: EmailResults
