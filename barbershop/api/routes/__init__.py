from . import (
    auth,
    availability,
    blocked_slots,
    bookings,
    misc,
    notifications,
    users,
)

__all__ = [
    "auth",
    "availability",
    "blocked_slots",
    "bookings",
    "misc",
    "notifications",
    "users",
]
