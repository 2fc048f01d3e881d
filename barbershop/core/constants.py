"""Common application-wide constants."""

# Slot grid
SLOT_MINUTES = 30
OPENING_HOUR = 9
WEEKDAY_CLOSING_HOUR = 18
WEEKEND_CLOSING_HOUR = 20

# Booking admission messages
SLOT_ALREADY_BOOKED = "Time slot already booked"
MISSING_FIELDS = "Missing required fields"
TIME_IN_PAST = "Appointment time cannot be in the past"
OUTSIDE_BUSINESS_HOURS = "Appointment time is outside business hours"


__all__ = [
    "SLOT_MINUTES",
    "OPENING_HOUR",
    "WEEKDAY_CLOSING_HOUR",
    "WEEKEND_CLOSING_HOUR",
    "SLOT_ALREADY_BOOKED",
    "MISSING_FIELDS",
    "TIME_IN_PAST",
    "OUTSIDE_BUSINESS_HOURS",
]
