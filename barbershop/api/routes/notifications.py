from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from ...api import deps
from ...config import get_settings
from ...db import models, schemas
from ...services.notifications import BaseNotifier

router = APIRouter(prefix="/admin", tags=["notifications"])


@router.post("/test-email", response_model=schemas.NotificationOutcome)
def send_test_email(
    payload: schemas.EmailCheckRequest | None = None,
    notifier: BaseNotifier | None = Depends(deps.get_notifier),
    _: models.User = Depends(deps.get_current_user),
):
    recipient = (payload.email if payload else None) or get_settings().admin_email
    if not recipient:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No recipient given and ADMIN_EMAIL is not configured",
        )
    if notifier is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Notifier unavailable")

    outcome = schemas.NotificationOutcome.model_validate(
        notifier.send_test_email(recipient), from_attributes=True
    )
    if not outcome.sent:
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=jsonable_encoder(outcome))
    return outcome
