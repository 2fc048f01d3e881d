from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import DateTime, Enum, Index, Integer, String, func, text
from sqlalchemy.orm import Mapped, mapped_column
from ..session import Base

ACTIVE_APPOINTMENT_INDEX = "uq_bookings_active_appointment_time"


class BookingStatus(str, PyEnum):
    pending = "pending"
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"


class PaymentStatus(str, PyEnum):
    paid = "paid"
    unpaid = "unpaid"
    refunded = "refunded"


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        # One live booking per slot start; cancelled rows free the slot again.
        Index(
            ACTIVE_APPOINTMENT_INDEX,
            "appointment_time",
            unique=True,
            postgresql_where=text("status != 'cancelled'"),
            sqlite_where=text("status != 'cancelled'"),
        ),
        Index("ix_bookings_appointment_status", "appointment_time", "status"),
        Index("ix_bookings_email", "email"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(64), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255))
    appointment_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus), default=BookingStatus.pending, nullable=False
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus), default=PaymentStatus.unpaid, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
