from . import (
    availability_service,
    booking_service,
    slot_grid,
)
__all__ = [
    "availability_service",
    "booking_service",
    "slot_grid",
]
