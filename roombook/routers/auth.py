from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from roombook.db import get_db
from roombook.schemas import LoginRequest, UserOut
from roombook.services import users as user_service

router = APIRouter()


@router.post("/login", response_model=UserOut)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """
    Sign-in callback for an identity the SSO provider has already verified.
    Rejects emails outside the corporate domains with 403 and creates the
    user on first login.
    """
    return user_service.sso_login(db, body.email, body.name)
