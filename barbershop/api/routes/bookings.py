from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from ...api import deps
from ...db.session import get_db
from ...db import models, schemas
from ...services import availability_service, booking_service
from ...services.notifications import BaseNotifier

router = APIRouter(prefix="/bookings", tags=["bookings"])


def _rejected(errors: list[booking_service.ItemError]) -> list[dict]:
    return [
        schemas.RejectedBooking.model_validate(error, from_attributes=True).model_dump()
        for error in errors
    ]


def _email_results(result: booking_service.AdmissionResult) -> schemas.EmailResults:
    return schemas.EmailResults(
        customer_emails=[
            schemas.NotificationOutcome.model_validate(outcome, from_attributes=True)
            for outcome in result.customer_notifications
        ],
        admin_email=(
            schemas.NotificationOutcome.model_validate(result.admin_notification, from_attributes=True)
            if result.admin_notification
            else None
        ),
    )


def _respond(status_code: int, body: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


@router.get("", response_model=list[schemas.Booking])
def list_bookings(
    db: Session = Depends(get_db),
    _: models.User = Depends(deps.get_current_user),
):
    return availability_service.list_bookings(db)


@router.post("")
def create_bookings(
    payload: Any = Body(...),
    db: Session = Depends(get_db),
    notifier: BaseNotifier | None = Depends(deps.get_notifier),
):
    is_bulk = isinstance(payload, list)
    if not (is_bulk and payload) and not isinstance(payload, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body must be a booking object or a non-empty list of bookings",
        )
    requests = payload if is_bulk else [payload]

    try:
        result = booking_service.admit_bookings(db, requests, notifier=notifier)
    except booking_service.BatchValidationError as exc:
        return _respond(
            status.HTTP_400_BAD_REQUEST,
            {"success": False, "message": str(exc), "errors": _rejected(exc.errors)},
        )
    except booking_service.PersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc

    rejected = result.rejected
    if not result.created:
        return _respond(
            status.HTTP_409_CONFLICT,
            {
                "success": False,
                "message": "All time slots unavailable",
                "conflicts": _rejected(rejected),
            },
        )

    bookings = [schemas.Booking.model_validate(booking) for booking in result.created]
    email_results = _email_results(result)

    if not is_bulk:
        return _respond(
            status.HTTP_201_CREATED,
            schemas.SingleBookingResponse(
                booking=bookings[0],
                email_sent=bool(result.customer_notifications and result.customer_notifications[0].sent),
                admin_notified=result.admin_notified,
                email_details=email_results,
            ),
        )

    summary = schemas.AdmissionSummary(
        total=result.total,
        successful=len(bookings),
        failed=len(rejected),
        emails_sent=result.emails_sent,
        admin_notified=result.admin_notified,
    )
    if rejected:
        return _respond(
            status.HTTP_207_MULTI_STATUS,
            schemas.BulkBookingResponse(
                message=f"Partial success: {len(bookings)} created, {len(rejected)} failed",
                bookings=bookings,
                conflicts=_rejected(rejected),
                email_results=email_results,
                summary=summary,
            ),
        )
    return _respond(
        status.HTTP_201_CREATED,
        schemas.BulkBookingResponse(
            message=f"Successfully created {len(bookings)} booking(s)",
            bookings=bookings,
            email_results=email_results,
            summary=summary,
        ),
    )
