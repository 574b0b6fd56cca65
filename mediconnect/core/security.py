"""
Security utilities for password hashing and access tokens.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from mediconnect.core.config import settings

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)


def create_access_token(
    subject: str,
    expires_delta: Optional[timedelta] = None,
    secret_key: Optional[str] = None,
    algorithm: Optional[str] = None
) -> str:
    """Create JWT access token with a unique token id (jti)."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    now = datetime.now(timezone.utc)
    to_encode = {
        "sub": subject,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + expires_delta,
        "type": "access",
    }
    return jwt.encode(
        to_encode,
        secret_key or settings.SECRET_KEY,
        algorithm=algorithm or settings.ALGORITHM
    )


def verify_token(
    token: str,
    secret_key: Optional[str] = None,
    algorithm: Optional[str] = None
) -> Optional[dict]:
    """Verify and decode JWT access token."""
    try:
        payload = jwt.decode(
            token,
            secret_key or settings.SECRET_KEY,
            algorithms=[algorithm or settings.ALGORITHM]
        )
    except JWTError:
        return None

    if payload.get("type") != "access":
        return None
    return payload
