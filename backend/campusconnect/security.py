"""Password hashing, email verification tokens and the JWT access token."""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from . import config

# pbkdf2 is pure python in passlib, so no bcrypt wheel is needed
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

VERIFICATION_TOKEN_BYTES = 32


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def generate_verification_token() -> str:
    return secrets.token_hex(VERIFICATION_TOKEN_BYTES)


def create_access_token(claims: Dict[str, Any], expires_minutes: Optional[int] = None) -> str:
    """Sign ``claims`` with the app secret. The token carries ``iat`` and ``exp``."""
    issued = datetime.now(timezone.utc)
    lifetime = timedelta(minutes=expires_minutes or config.JWT_EXPIRES_MINUTES)
    payload = {**claims, "iat": issued, "exp": issued + lifetime}
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the claims of a valid token, or None if it is expired or tampered with."""
    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except jwt.PyJWTError:
        return None
