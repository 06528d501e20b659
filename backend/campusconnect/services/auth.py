"""Signup, email verification, login and profile updates."""

import logging
from typing import Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..exceptions import AuthenticationError, BadRequestError, ConflictError
from ..models import Role, User
from ..schemas import ProfileUpdate, SignupRequest
from ..security import (
    create_access_token,
    generate_verification_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "User already exists with this email"


def get_user_by_email(session: Session, email: str):
    return session.exec(select(User).where(User.email == email)).first()


def register(session: Session, payload: SignupRequest) -> Tuple[User, str]:
    """Create an unverified account and return it with its verification token."""
    if get_user_by_email(session, payload.email):
        raise ConflictError(EMAIL_TAKEN)

    token = generate_verification_token()
    user = User(
        name=payload.name,
        email=payload.email,
        password_hash=hash_password(payload.password),
        role=payload.role,
        department=payload.department,
        year=payload.year if payload.role == Role.STUDENT else None,
        verification_token=token,
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        # lost a race with a concurrent signup for the same address
        session.rollback()
        raise ConflictError(EMAIL_TAKEN)
    session.refresh(user)
    logger.info("Registered %s user %s", user.role.value, user.id)
    return user, token


def verify_email(session: Session, token: str) -> User:
    user = session.exec(select(User).where(User.verification_token == token)).first() if token else None
    if not user:
        raise BadRequestError("Invalid or expired verification token")
    user.is_verified = True
    user.verification_token = None
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("Verified email for user %s", user.id)
    return user


def login(session: Session, email: str, password: str) -> Tuple[str, User]:
    user = get_user_by_email(session, email)
    if not user or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid credentials")
    if not user.is_verified:
        raise AuthenticationError("Please verify your email before logging in")
    token = create_access_token({"sub": user.id, "role": user.role.value})
    return token, user


def update_profile(session: Session, user: User, payload: ProfileUpdate) -> User:
    user.name = payload.name
    user.department = payload.department
    user.year = payload.year if user.role == Role.STUDENT else None
    user.bio = payload.bio or None
    user.skills = list(payload.skills or [])
    session.add(user)
    session.commit()
    session.refresh(user)
    return user
