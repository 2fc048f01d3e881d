import datetime as dt
from sqlalchemy import Boolean, Date, DateTime, Index, Integer, String, UniqueConstraint, func, text
from sqlalchemy.orm import Mapped, mapped_column
from ..session import Base

DEFAULT_BLOCK_REASON = "Unavailable"


class BlockedSlot(Base):
    __tablename__ = "blocked_slots"
    __table_args__ = (
        UniqueConstraint("date", "time_slot", name="uq_blocked_slot_date_time"),
        # NULL time slots never collide in a unique constraint, so whole-day
        # blocks need their own index.
        Index(
            "uq_blocked_slot_full_day",
            "date",
            unique=True,
            postgresql_where=text("is_full_day"),
            sqlite_where=text("is_full_day = 1"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    time_slot: Mapped[str | None] = mapped_column(String(16))
    reason: Mapped[str] = mapped_column(String(255), default=DEFAULT_BLOCK_REASON, nullable=False)
    blocked_by: Mapped[str] = mapped_column(String(255), default="admin", nullable=False)
    is_full_day: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
