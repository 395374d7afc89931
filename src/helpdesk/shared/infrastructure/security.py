"""
Security
========

Password hashing (passlib, argon2) and access tokens (python-jose, JWT).
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from helpdesk.config import Role, settings
from helpdesk.core import AuthenticationException

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def create_access_token(
    user_id: int,
    email: str,
    role: Role | str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign a token carrying the caller's id, email and role."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload = {
        "userId": user_id,
        "email": email,
        "role": Role(role).value,
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises:
        AuthenticationException: Token is malformed, expired or forged
    """
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise AuthenticationException("Invalid or expired token.") from exc
