"""Persistence-side queries for bookings and administrative blocks."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
import logging
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import models
from ..db.models.booking import ACTIVE_APPOINTMENT_INDEX, BookingStatus
from . import slot_grid

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """The store failed in a way that is not a plain slot conflict."""


class BlockError(Exception):
    pass


class BlockedSlotConflict(BlockError):
    pass


class BlockNotFound(BlockError):
    pass


class InvalidSlotError(BlockError):
    pass


@dataclass(slots=True)
class InsertFailure:
    position: int
    booking: models.Booking
    reason: str


@dataclass(slots=True)
class AvailabilityReport:
    date: date
    day_type: str
    all_slots: list[str]
    available_slots: list[str] = field(default_factory=list)
    booked_slots: list[str] = field(default_factory=list)
    blocked_slots: list[str] = field(default_factory=list)
    is_full_day_blocked: bool = False
    blocked_reason: str | None = None

    @property
    def total_slots(self) -> int:
        return len(self.all_slots)

    @property
    def available_count(self) -> int:
        return len(self.available_slots)


def _active_bookings():
    return models.Booking.status != BookingStatus.cancelled


def is_slot_conflict(exc: IntegrityError) -> bool:
    constraint = getattr(getattr(exc.orig, "diag", None), "constraint_name", "") or ""
    if constraint:
        return constraint == ACTIVE_APPOINTMENT_INDEX
    return "bookings.appointment_time" in str(exc.orig)


def find_occupied_instants(db: Session, instants: Iterable[datetime]) -> set[datetime]:
    """Return the subset of ``instants`` already held by a non-cancelled booking."""
    candidates = set(instants)
    if not candidates:
        return set()
    try:
        occupied = db.scalars(
            select(models.Booking.appointment_time)
            .where(models.Booking.appointment_time.in_(candidates))
            .where(_active_bookings())
        ).all()
    except SQLAlchemyError as exc:
        logger.exception("Failed to query occupied slots")
        raise PersistenceError("Could not check slot availability") from exc
    return {instant for instant in occupied if instant in candidates}


def insert_bookings(
    db: Session, records: list[models.Booking]
) -> tuple[list[models.Booking], list[InsertFailure]]:
    """Insert ``records`` one savepoint at a time and commit the survivors.

    A record that trips the active-appointment unique index is skipped and
    reported; the rest of the batch still goes in. Any other database error
    rolls the whole call back and raises :class:`PersistenceError`.
    """
    created: list[models.Booking] = []
    failures: list[InsertFailure] = []
    try:
        for position, record in enumerate(records):
            try:
                with db.begin_nested():
                    db.add(record)
                    db.flush()
            except IntegrityError as exc:
                if not is_slot_conflict(exc):
                    raise
                logger.info(
                    "Slot taken concurrently, skipping booking",
                    extra={"appointment_time": record.appointment_time.isoformat()},
                )
                if record in db:
                    db.expunge(record)
                failures.append(InsertFailure(position, record, "Time slot already booked"))
                continue
            created.append(record)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to persist bookings", extra={"count": len(records)})
        raise PersistenceError("Could not save bookings") from exc
    for booking in created:
        db.refresh(booking)
    return created, failures


def list_bookings(db: Session) -> list[models.Booking]:
    return list(
        db.scalars(
            select(models.Booking).order_by(
                models.Booking.appointment_time.desc(), models.Booking.id.desc()
            )
        ).all()
    )


def list_availability(db: Session, day: date) -> AvailabilityReport:
    """Partition the slot grid of ``day`` into available, booked and blocked labels."""
    all_slots = slot_grid.slot_labels(day)
    report = AvailabilityReport(date=day, day_type=slot_grid.day_type(day), all_slots=all_slots)

    full_day = db.scalars(
        select(models.BlockedSlot).where(
            models.BlockedSlot.date == day, models.BlockedSlot.is_full_day.is_(True)
        )
    ).first()
    if full_day:
        report.blocked_slots = list(all_slots)
        report.is_full_day_blocked = True
        report.blocked_reason = full_day.reason
        return report

    blocked = set(
        db.scalars(
            select(models.BlockedSlot.time_slot).where(
                models.BlockedSlot.date == day, models.BlockedSlot.is_full_day.is_(False)
            )
        ).all()
    )

    day_start = datetime.combine(day, time.min)
    appointment_times = db.scalars(
        select(models.Booking.appointment_time)
        .where(models.Booking.appointment_time >= day_start)
        .where(models.Booking.appointment_time < day_start + timedelta(days=1))
        .where(_active_bookings())
        .order_by(models.Booking.appointment_time)
    ).all()
    booked: list[str] = []
    for appointment_time in appointment_times:
        label = slot_grid.format_slot_label(
            slot_grid.normalize_to_slot_start(appointment_time).time()
        )
        if label not in booked:
            booked.append(label)

    report.booked_slots = booked
    report.blocked_slots = [label for label in all_slots if label in blocked]
    report.available_slots = [
        label for label in all_slots if label not in blocked and label not in booked
    ]
    return report


def canonical_slot_label(day: date, time_slot: str) -> str:
    try:
        slot = slot_grid.parse_slot_label(time_slot)
    except ValueError as exc:
        raise InvalidSlotError(str(exc)) from exc
    if slot not in slot_grid.slot_grid(day):
        raise InvalidSlotError(f"{time_slot} is not a bookable slot on {day.isoformat()}")
    return slot_grid.format_slot_label(slot)


def _find_block(db: Session, day: date, time_slot: str | None, is_full_day: bool):
    stmt = select(models.BlockedSlot).where(models.BlockedSlot.date == day)
    if is_full_day:
        stmt = stmt.where(models.BlockedSlot.is_full_day.is_(True))
    else:
        stmt = stmt.where(
            models.BlockedSlot.is_full_day.is_(False),
            models.BlockedSlot.time_slot == time_slot,
        )
    return db.scalars(stmt).first()


def create_block(
    db: Session,
    day: date,
    time_slot: str | None,
    reason: str,
    is_full_day: bool,
    blocked_by: str = "admin",
) -> models.BlockedSlot:
    label = None if is_full_day else canonical_slot_label(day, time_slot or "")
    if _find_block(db, day, label, is_full_day):
        raise BlockedSlotConflict("This slot is already blocked")
    block = models.BlockedSlot(
        date=day,
        time_slot=label,
        reason=reason,
        blocked_by=blocked_by,
        is_full_day=is_full_day,
    )
    db.add(block)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise BlockedSlotConflict("This slot is already blocked") from exc
    db.refresh(block)
    logger.info(
        "Blocked slot created",
        extra={"date": day.isoformat(), "time_slot": label, "is_full_day": is_full_day},
    )
    return block


def delete_block(db: Session, day: date, time_slot: str | None, is_full_day: bool) -> None:
    label = None
    if not is_full_day:
        try:
            label = slot_grid.format_slot_label(slot_grid.parse_slot_label(time_slot or ""))
        except ValueError as exc:
            raise BlockNotFound("Blocked slot not found") from exc
    block = _find_block(db, day, label, is_full_day)
    if not block:
        raise BlockNotFound("Blocked slot not found")
    db.delete(block)
    db.commit()
    logger.info(
        "Blocked slot removed",
        extra={"date": day.isoformat(), "time_slot": label, "is_full_day": is_full_day},
    )


def list_blocks(
    db: Session,
    day: date | None = None,
    start: date | None = None,
    end: date | None = None,
) -> list[models.BlockedSlot]:
    stmt = select(models.BlockedSlot)
    if day:
        stmt = stmt.where(models.BlockedSlot.date == day)
    elif start and end:
        stmt = stmt.where(models.BlockedSlot.date.between(start, end))
    blocks = db.scalars(stmt).all()
    # Whole-day blocks first within a date, then slots in clock order.
    return sorted(
        blocks,
        key=lambda block: (
            block.date,
            not block.is_full_day,
            slot_grid.parse_slot_label(block.time_slot) if block.time_slot else time.min,
        ),
    )
