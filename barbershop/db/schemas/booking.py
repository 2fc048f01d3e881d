from datetime import datetime
import re
from typing import Any

from pydantic import BaseModel, StrictBool, field_validator
from pydantic_core import PydanticCustomError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class BookingRequest(BaseModel):
    """One raw booking request as submitted by a customer."""

    customer_name: str
    phone_number: str
    appointment_time: datetime
    email: str | None = None
    pay_now: StrictBool = False

    @field_validator("customer_name", "phone_number", "appointment_time", mode="before")
    @classmethod
    def require_value(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise PydanticCustomError("missing", "Field required")
        return value

    @field_validator("customer_name", "phone_number")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, value: Any) -> Any:
        if value is None:
            return None
        if not isinstance(value, str):
            raise PydanticCustomError("email_type", "Email must be a string")
        normalized = value.strip()
        if not normalized:
            return None
        if not EMAIL_RE.match(normalized):
            raise PydanticCustomError("email_format", "Invalid email format")
        return normalized


class Booking(BaseModel):
    id: int
    customer_name: str
    phone_number: str
    email: str | None = None
    appointment_time: datetime
    status: str
    payment_status: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True
