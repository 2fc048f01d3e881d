from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from ...db.session import get_db
from ...db import schemas
from ...services import availability_service

router = APIRouter(prefix="/available-slots", tags=["availability"])


@router.get("", response_model=schemas.AvailabilityResponse)
def available_slots(
    day: date = Query(..., alias="date", description="Calendar date, YYYY-MM-DD"),
    db: Session = Depends(get_db),
):
    report = availability_service.list_availability(db, day)
    return schemas.AvailabilityResponse.model_validate(report, from_attributes=True)
