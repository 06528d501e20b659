# backend/campusconnect/deps.py
from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from .db import get_session
from .exceptions import AuthenticationError
from .models import User
from .security import decode_access_token
from .services.mailer import EmailService
from .services.storage import StorageService

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_email_service() -> EmailService:
    return EmailService.from_config()


@lru_cache
def get_storage_service() -> StorageService:
    return StorageService.from_config()


# ---- dependency: get_current_user ----
def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("No token, authorization denied")
    payload = decode_access_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise AuthenticationError("Token is not valid")
    user = session.get(User, payload["sub"])
    if not user:
        raise AuthenticationError("Token is not valid")
    if not user.is_verified:
        raise AuthenticationError("Please verify your email before logging in")
    return user
