"""
Password hashing and JWT helpers.
"""
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import jwt

from backend.app.core.config import settings


def get_password_hash(password: str) -> str:
    """Hash a plaintext password with bcrypt."""
    salt = bcrypt.gensalt(rounds=settings.password_hash_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Check a plaintext password against a bcrypt hash.

    Returns False (instead of raising) when the stored value is not a bcrypt
    hash, so callers can fall back to the legacy plaintext comparison.
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Sign a JWT carrying `data` (sub, role) plus an exp claim."""
    to_encode = data.copy()
    delta = expires_delta or timedelta(days=settings.access_token_expire_days)
    to_encode["exp"] = datetime.now(timezone.utc) + delta
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """Decode and verify a JWT. Raises jose.JWTError when invalid or expired."""
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


def issue_token(subject_id: str, role: str) -> str:
    """Token for a user, employer or admin principal."""
    return create_access_token(data={"sub": str(subject_id), "role": role})
