from datetime import timedelta
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel
from sqlalchemy.orm import Session
from ...core import auth, security
from ...db.session import get_db
from ...db import models
from ...config import get_settings
from .. import deps


router = APIRouter(prefix="/auth", tags=["auth"])


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: dict


@router.post("/login", response_model=TokenResponse)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    user = auth.authenticate_user(db, form_data.username, form_data.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    settings = get_settings()
    token = security.create_access_token(
        {"sub": str(user.id)}, timedelta(minutes=settings.jwt_expire_min)
    )
    return TokenResponse(access_token=token, user={"id": user.id, "name": user.name, "email": user.email})


@router.get("/me")
def me(current: models.User = Depends(deps.get_current_user)):
    return {"id": current.id, "name": current.name, "email": current.email}
