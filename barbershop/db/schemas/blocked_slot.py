from datetime import date, datetime
from pydantic import BaseModel, model_validator

from ..models.blocked_slot import DEFAULT_BLOCK_REASON


class BlockedSlotKey(BaseModel):
    date: date
    time_slot: str | None = None
    is_full_day: bool = False

    @model_validator(mode="after")
    def check_slot(self):
        if self.is_full_day:
            self.time_slot = None
        elif not (self.time_slot or "").strip():
            raise ValueError("time_slot is required unless is_full_day is set")
        return self


class BlockedSlotCreate(BlockedSlotKey):
    reason: str | None = None

    @model_validator(mode="after")
    def default_reason(self):
        if not (self.reason or "").strip():
            self.reason = DEFAULT_BLOCK_REASON
        return self


class BlockedSlotDelete(BlockedSlotKey):
    pass


class BlockedSlot(BaseModel):
    id: int
    date: date
    time_slot: str | None = None
    reason: str
    blocked_by: str
    is_full_day: bool
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class BlockedSlotList(BaseModel):
    success: bool = True
    blocked_slots: list[BlockedSlot]
    count: int
