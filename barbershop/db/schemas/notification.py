from typing import Any

from pydantic import BaseModel, field_validator

from .booking import EMAIL_RE


class EmailCheckRequest(BaseModel):
    """Recipient for a delivery check; falls back to ADMIN_EMAIL when omitted."""

    email: str | None = None

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, value: Any) -> Any:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError("Email must be a string")
        normalized = value.strip()
        if not normalized:
            return None
        if not EMAIL_RE.match(normalized):
            raise ValueError("Invalid email format")
        return normalized
