from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import logging
from typing import Any, Sequence

from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..core.constants import (
    MISSING_FIELDS,
    OUTSIDE_BUSINESS_HOURS,
    SLOT_ALREADY_BOOKED,
    TIME_IN_PAST,
)
from ..db import models, schemas
from ..db.models.booking import BookingStatus, PaymentStatus
from . import availability_service, slot_grid
from .availability_service import PersistenceError
from .notifications import BaseNotifier, NotificationResult

logger = logging.getLogger(__name__)

__all__ = [
    "AdmissionResult",
    "BatchValidationError",
    "BookingError",
    "ItemError",
    "PersistenceError",
    "admit_bookings",
    "dispatch_notifications",
]


class BookingError(Exception):
    pass


class BatchValidationError(BookingError):
    def __init__(self, errors: list["ItemError"]) -> None:
        super().__init__(f"Validation failed for all {len(errors)} booking(s)")
        self.errors = errors


@dataclass(slots=True)
class ItemError:
    index: int
    customer_name: str
    kind: str
    message: str
    fields: list[str] = field(default_factory=list)
    provided: Any = None
    conflicts_with: int | None = None


@dataclass(slots=True)
class AdmissionResult:
    total: int
    created: list[models.Booking] = field(default_factory=list)
    validation_errors: list[ItemError] = field(default_factory=list)
    conflicts: list[ItemError] = field(default_factory=list)
    customer_notifications: list[NotificationResult] = field(default_factory=list)
    admin_notification: NotificationResult | None = None

    @property
    def rejected(self) -> list[ItemError]:
        return sorted(self.validation_errors + self.conflicts, key=lambda error: error.index)

    @property
    def emails_sent(self) -> int:
        return sum(1 for outcome in self.customer_notifications if outcome.sent)

    @property
    def admin_notified(self) -> bool:
        return bool(self.admin_notification and self.admin_notification.sent)


@dataclass(slots=True)
class _Candidate:
    index: int
    request: schemas.BookingRequest
    instant: datetime


def _customer_name(raw: Any) -> str:
    if isinstance(raw, dict):
        name = raw.get("customer_name")
        if isinstance(name, str) and name.strip():
            return name.strip()
    return "Unknown"


def _validation_error(index: int, raw: Any, exc: ValidationError) -> ItemError:
    missing: list[str] = []
    invalid: list[str] = []
    for error in exc.errors():
        name = str(error["loc"][0]) if error["loc"] else "body"
        target = missing if error["type"] == "missing" else invalid
        if name not in target:
            target.append(name)
    if missing:
        return ItemError(index, _customer_name(raw), "validation", MISSING_FIELDS, missing)
    provided = {name: raw.get(name) for name in invalid} if isinstance(raw, dict) else raw
    if len(invalid) == 1 and isinstance(provided, dict):
        provided = provided[invalid[0]]
    return ItemError(
        index,
        _customer_name(raw),
        "validation",
        f"Invalid {', '.join(invalid)}",
        invalid,
        provided,
    )


def _validate(
    requests: Sequence[Any], now: datetime
) -> tuple[list[_Candidate], list[ItemError]]:
    candidates: list[_Candidate] = []
    errors: list[ItemError] = []
    for index, raw in enumerate(requests):
        if not isinstance(raw, dict):
            errors.append(
                ItemError(index, "Unknown", "validation", "Booking must be an object", ["body"], raw)
            )
            continue
        try:
            request = schemas.BookingRequest.model_validate(raw)
        except ValidationError as exc:
            errors.append(_validation_error(index, raw, exc))
            continue

        requested = slot_grid.to_local_naive(request.appointment_time)
        if requested < now:
            errors.append(
                ItemError(
                    index,
                    request.customer_name,
                    "validation",
                    TIME_IN_PAST,
                    ["appointment_time"],
                    raw.get("appointment_time"),
                )
            )
            continue

        instant = slot_grid.normalize_to_slot_start(requested)
        if not slot_grid.is_on_grid(instant):
            errors.append(
                ItemError(
                    index,
                    request.customer_name,
                    "validation",
                    OUTSIDE_BUSINESS_HOURS,
                    ["appointment_time"],
                    raw.get("appointment_time"),
                )
            )
            continue
        candidates.append(_Candidate(index, request, instant))
    return candidates, errors


def _build_booking(candidate: _Candidate) -> models.Booking:
    request = candidate.request
    return models.Booking(
        customer_name=request.customer_name,
        phone_number=request.phone_number,
        email=request.email,
        appointment_time=candidate.instant,
        status=BookingStatus.pending,
        payment_status=PaymentStatus.paid if request.pay_now else PaymentStatus.unpaid,
    )


def _conflict(candidate: _Candidate, holder: int | None = None) -> ItemError:
    return ItemError(
        candidate.index,
        candidate.request.customer_name,
        "conflict",
        SLOT_ALREADY_BOOKED,
        ["appointment_time"],
        candidate.instant.isoformat(),
        conflicts_with=holder,
    )


def admit_bookings(
    db: Session,
    requests: Sequence[Any],
    *,
    notifier: BaseNotifier | None,
    now: datetime | None = None,
) -> AdmissionResult:
    """Validate, de-conflict and persist a batch of booking requests.

    Requests are decided in input order, so an earlier request always wins a
    slot over a later one in the same batch. Notifications go out only after
    the admitted bookings are committed.

    Raises:
        BatchValidationError: every request failed validation; the store is
            not touched.
        PersistenceError: the store failed for a reason other than a slot
            conflict.
    """
    now = slot_grid.to_local_naive(now) if now else slot_grid.local_now()
    result = AdmissionResult(total=len(requests))

    candidates, result.validation_errors = _validate(requests, now)
    if requests and not candidates:
        raise BatchValidationError(result.validation_errors)

    occupied = availability_service.find_occupied_instants(
        db, {candidate.instant for candidate in candidates}
    )

    # Instants taken earlier in this batch map to the index that took them.
    holders: dict[datetime, int] = {}
    admitted: list[tuple[_Candidate, models.Booking]] = []
    for candidate in candidates:
        if candidate.instant in occupied or candidate.instant in holders:
            result.conflicts.append(_conflict(candidate, holders.get(candidate.instant)))
            continue
        holders[candidate.instant] = candidate.index
        admitted.append((candidate, _build_booking(candidate)))

    if admitted:
        created, failures = availability_service.insert_bookings(
            db, [booking for _, booking in admitted]
        )
        for failure in failures:
            result.conflicts.append(_conflict(admitted[failure.position][0]))
        result.created = created
    result.conflicts.sort(key=lambda error: error.index)

    logger.info(
        "Admission finished",
        extra={
            "total": result.total,
            "admitted": len(result.created),
            "invalid": len(result.validation_errors),
            "conflicts": len(result.conflicts),
        },
    )

    if result.created:
        result.customer_notifications, result.admin_notification = dispatch_notifications(
            notifier, result.created
        )
    return result


def dispatch_notifications(
    notifier: BaseNotifier | None, bookings: Sequence[models.Booking]
) -> tuple[list[NotificationResult], NotificationResult]:
    """Send customer confirmations and one admin summary; never raises."""
    customer_results: list[NotificationResult] = []
    for booking in bookings:
        if not booking.email:
            customer_results.append(
                NotificationResult.skipped("No email provided", booking_id=booking.id)
            )
            continue
        if notifier is None:
            customer_results.append(
                NotificationResult.failed(
                    reason="Notifier unavailable", recipient=booking.email, booking_id=booking.id
                )
            )
            continue
        try:
            customer_results.append(notifier.send_booking_confirmation(booking))
        except Exception as exc:
            logger.exception("Confirmation dispatch failed", extra={"booking_id": booking.id})
            customer_results.append(
                NotificationResult.failed(error=str(exc), recipient=booking.email, booking_id=booking.id)
            )

    if notifier is None:
        return customer_results, NotificationResult.failed(reason="Notifier unavailable")
    try:
        admin_result = notifier.send_admin_summary(list(bookings))
    except Exception as exc:
        logger.exception("Admin summary dispatch failed", extra={"count": len(bookings)})
        admin_result = NotificationResult.failed(error=str(exc))
    return customer_results, admin_result
