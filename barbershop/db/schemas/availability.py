from datetime import date
from pydantic import BaseModel


class AvailabilityResponse(BaseModel):
    success: bool = True
    date: date
    day_type: str
    available_slots: list[str]
    booked_slots: list[str]
    blocked_slots: list[str]
    blocked_reason: str | None = None
    is_full_day_blocked: bool
    total_slots: int
    available_count: int

    class Config:
        from_attributes = True
