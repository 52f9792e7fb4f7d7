"""User lookup, SSO login and upsert by email."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from roombook.config import ALLOWED_LOGIN_DOMAINS
from roombook.errors import AuthorizationError, NotFoundError, ValidationError
from roombook.models import User, UserRole

logger = logging.getLogger(__name__)


def parse_role(raw: Optional[str]) -> UserRole:
    """Unknown or missing roles fall back to ``user``."""
    try:
        return UserRole((raw or "user").lower())
    except ValueError:
        return UserRole.USER


def email_domain_allowed(email: str) -> bool:
    return email.rsplit("@", 1)[-1].lower() in ALLOWED_LOGIN_DOMAINS


def get_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found.")
    return user


def find_user(db: Session, user_id: Optional[str] = None, email: Optional[str] = None) -> User:
    if not user_id and not email:
        raise ValidationError("Either id or email is required.")
    query = db.query(User)
    if user_id and email:
        query = query.filter((User.id == user_id) | (User.email == email))
    elif user_id:
        query = query.filter(User.id == user_id)
    else:
        query = query.filter(User.email == email)
    user = query.first()
    if user is None:
        raise NotFoundError("User not found.")
    return user


def create_user(db: Session, email: str, name: Optional[str] = None, role: Optional[str] = None) -> User:
    if db.query(User).filter(User.email == email).first():
        raise ValidationError("A user with this email already exists.")
    user = User(email=email, name=name or email, role=parse_role(role))
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created user %s (%s)", user.id, user.role.value)
    return user


def upsert_organizer(db: Session, email: str, name: Optional[str] = None, user_id: Optional[str] = None) -> User:
    """Find the organizer by email, refreshing the display name, or create them.

    Does not commit; the caller's write does.
    """
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        user = User(email=email, name=name or email, role=UserRole.USER)
        if user_id:
            user.id = user_id
        db.add(user)
        db.flush()
    else:
        user.name = name or email
    return user


def sso_login(db: Session, email: str, name: Optional[str] = None) -> User:
    """Accept an identity already verified by the SSO provider.

    Raises:
        AuthorizationError: if the email domain is not on the allow-list
    """
    if not email_domain_allowed(email):
        logger.warning("Login rejected, email domain not allowed: %s", email)
        raise AuthorizationError("Email domain not allowed.")

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        user = User(email=email, name=name or email, role=UserRole.USER)
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("First login, created user %s", email)
    return user


def update_user(db: Session, user_id: str, name: Optional[str] = None, role: Optional[UserRole] = None) -> User:
    user = get_user(db, user_id)
    if name is not None:
        user.name = name
    if role is not None:
        user.role = role
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: str) -> None:
    user = get_user(db, user_id)
    db.delete(user)
    db.commit()
