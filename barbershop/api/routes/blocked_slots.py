from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from ...api import deps
from ...db.session import get_db
from ...db import models, schemas
from ...services import availability_service

router = APIRouter(prefix="/admin", tags=["blocked-slots"])


@router.post("/block-slot", response_model=schemas.BlockedSlot, status_code=status.HTTP_201_CREATED)
def block_slot(
    payload: schemas.BlockedSlotCreate,
    db: Session = Depends(get_db),
    user: models.User = Depends(deps.get_current_user),
):
    try:
        return availability_service.create_block(
            db,
            payload.date,
            payload.time_slot,
            payload.reason,
            payload.is_full_day,
            blocked_by=user.email or user.name,
        )
    except availability_service.InvalidSlotError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except availability_service.BlockedSlotConflict as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.delete("/unblock-slot")
def unblock_slot(
    payload: schemas.BlockedSlotDelete,
    db: Session = Depends(get_db),
    _: models.User = Depends(deps.get_current_user),
):
    try:
        availability_service.delete_block(db, payload.date, payload.time_slot, payload.is_full_day)
    except availability_service.BlockNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return {"success": True, "message": "Slot unblocked successfully"}


@router.get("/blocked-slots", response_model=schemas.BlockedSlotList)
def list_blocked_slots(
    date: date | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
    _: models.User = Depends(deps.get_current_user),
):
    blocks = availability_service.list_blocks(db, day=date, start=start_date, end=end_date)
    return schemas.BlockedSlotList(
        blocked_slots=[schemas.BlockedSlot.model_validate(block) for block in blocks],
        count=len(blocks),
    )
