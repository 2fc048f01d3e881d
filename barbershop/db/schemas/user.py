from datetime import datetime
from pydantic import BaseModel, field_validator


class UserCreate(BaseModel):
    name: str
    email: str | None = None
    password: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("Name is required")
        return normalized

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip().lower() or None


class User(BaseModel):
    id: int
    name: str
    email: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
