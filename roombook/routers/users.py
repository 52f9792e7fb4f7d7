from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from roombook.db import get_db
from roombook.models import User
from roombook.schemas import UserCreate, UserOut, UserUpdate
from roombook.services import users as user_service

router = APIRouter()


@router.get("", response_model=list[UserOut])
def list_users(db: Session = Depends(get_db)):
    return db.query(User).order_by(User.created_at.asc()).all()


@router.post("", response_model=UserOut, status_code=201)
def create_user(body: UserCreate, db: Session = Depends(get_db)):
    return user_service.create_user(db, body.email, body.name, body.role)


@router.get("/me", response_model=UserOut)
def current_user(
    user_id: str | None = Query(default=None, alias="id"),
    email: str | None = Query(default=None),
    db: Session = Depends(get_db)
):
    if not user_id and not email:
        raise HTTPException(status_code=400, detail="Either id or email is required.")
    return user_service.find_user(db, user_id=user_id, email=email)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, db: Session = Depends(get_db)):
    return user_service.get_user(db, user_id)


@router.patch("/{user_id}", response_model=UserOut)
def update_user(user_id: str, body: UserUpdate, db: Session = Depends(get_db)):
    return user_service.update_user(db, user_id, name=body.name, role=body.role)


@router.delete("/{user_id}")
def delete_user(user_id: str, db: Session = Depends(get_db)):
    user_service.delete_user(db, user_id)
    return {"ok": True}
