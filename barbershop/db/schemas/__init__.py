from .booking import Booking, BookingRequest
from .admission import (
    AdmissionSummary,
    BulkBookingResponse,
    EmailResults,
    NotificationOutcome,
    RejectedBooking,
    SingleBookingResponse,
)
from .blocked_slot import BlockedSlot, BlockedSlotCreate, BlockedSlotDelete, BlockedSlotList
from .availability import AvailabilityResponse
from .notification import EmailCheckRequest
from .user import User, UserCreate
