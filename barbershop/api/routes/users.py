from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from ...api import deps
from ...core import security
from ...db.session import get_db
from ...db import models, schemas

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[schemas.User])
def list_users(
    db: Session = Depends(get_db),
    _: models.User = Depends(deps.get_current_user),
):
    return db.query(models.User).order_by(models.User.id).all()


@router.post("", response_model=schemas.User, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: schemas.UserCreate,
    db: Session = Depends(get_db),
    _: models.User = Depends(deps.get_current_user),
):
    user = models.User(
        name=payload.name,
        email=payload.email,
        password_hash=security.get_password_hash(payload.password) if payload.password else None,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already exists") from exc
    db.refresh(user)
    return user
