from .user import User
from .booking import Booking, BookingStatus, PaymentStatus, ACTIVE_APPOINTMENT_INDEX
from .blocked_slot import BlockedSlot, DEFAULT_BLOCK_REASON
