"""Fixed 30-minute slot grid and appointment time normalization.

All scheduling happens in one implicit local zone (``Settings.timezone``).
Timestamps are stored naive; aware inputs are converted to the business zone
before their offset is dropped.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
import re
from zoneinfo import ZoneInfo

from ..config import get_settings
from ..core.constants import (
    OPENING_HOUR,
    SLOT_MINUTES,
    WEEKDAY_CLOSING_HOUR,
    WEEKEND_CLOSING_HOUR,
)

_LABEL_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])?\s*$")


def business_zone() -> ZoneInfo:
    return ZoneInfo(get_settings().timezone)


def local_now() -> datetime:
    """Current wall-clock time in the business zone, without tzinfo."""
    return datetime.now(business_zone()).replace(tzinfo=None)


def to_local_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(business_zone()).replace(tzinfo=None)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def day_type(day: date) -> str:
    return "weekend" if is_weekend(day) else "weekday"


def closing_hour(day: date) -> int:
    return WEEKEND_CLOSING_HOUR if is_weekend(day) else WEEKDAY_CLOSING_HOUR


def slot_grid(day: date) -> list[time]:
    """Return every slot start for ``day``, from opening up to closing (exclusive)."""
    slots: list[time] = []
    current = datetime.combine(day, time(OPENING_HOUR))
    closing = datetime.combine(day, time(closing_hour(day)))
    while current < closing:
        slots.append(current.time())
        current += timedelta(minutes=SLOT_MINUTES)
    return slots


def normalize_to_slot_start(value: datetime) -> datetime:
    """Floor ``value`` to the start of its containing slot."""
    value = to_local_naive(value)
    return value.replace(
        minute=(value.minute // SLOT_MINUTES) * SLOT_MINUTES,
        second=0,
        microsecond=0,
    )


def is_on_grid(instant: datetime) -> bool:
    instant = to_local_naive(instant)
    return instant.time() in slot_grid(instant.date())


def format_slot_label(slot: time) -> str:
    period = "PM" if slot.hour >= 12 else "AM"
    hour = slot.hour % 12 or 12
    return f"{hour}:{slot.minute:02d} {period}"


def parse_slot_label(text: str) -> time:
    """Parse ``9:30 AM`` or ``09:30`` into a time of day.

    Raises:
        ValueError: if ``text`` is not a recognisable time of day.
    """
    match = _LABEL_RE.match(text or "")
    if not match:
        raise ValueError(f"Invalid time slot '{text}'")
    hour, minute, period = int(match.group(1)), int(match.group(2)), match.group(3)
    if period:
        if not 1 <= hour <= 12:
            raise ValueError(f"Invalid time slot '{text}'")
        hour = hour % 12 + (12 if period.upper() == "PM" else 0)
    if hour > 23 or minute > 59:
        raise ValueError(f"Invalid time slot '{text}'")
    return time(hour, minute)


def slot_labels(day: date) -> list[str]:
    return [format_slot_label(slot) for slot in slot_grid(day)]
