"""
Security utilities for password hashing and JWT token handling.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
import hashlib
import uuid

import bcrypt
from jose import jwt, JWTError
from sqlalchemy.orm import Session

from tablebook.core.config import get_settings
from tablebook.models.token_blacklist import TokenBlacklist

settings = get_settings()

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def hash_token(token: str) -> str:
    """Hash a JWT before it is stored in the blacklist."""
    return hashlib.sha256(token.encode()).hexdigest()


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


def _create_token(subject: str | Any, token_type: str, expires_delta: timedelta, role: Optional[str]) -> str:
    to_encode = {
        "sub": str(subject),
        "exp": datetime.now(timezone.utc) + expires_delta,
        "type": token_type,
        # Unique per token so two tokens minted in the same second differ
        "jti": uuid.uuid4().hex,
    }
    if role:
        to_encode["role"] = role
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(subject: str | Any, expires_delta: timedelta | None = None, role: str | None = None) -> str:
    """Create a JWT access token."""
    delta = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _create_token(subject, ACCESS_TOKEN_TYPE, delta, role)


def create_refresh_token(subject: str | Any, expires_delta: timedelta | None = None, role: str | None = None) -> str:
    """Create a JWT refresh token."""
    delta = expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    return _create_token(subject, REFRESH_TOKEN_TYPE, delta, role)


def decode_token(token: str, expected_type: str | None = None) -> dict | None:
    """
    Decode and validate a JWT token.

    Returns the payload, or None if the signature/expiry is invalid or the
    token is not of `expected_type`.
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
    if expected_type and payload.get("type") != expected_type:
        return None
    return payload


def token_expiry(payload: dict) -> datetime:
    """Expiry of a decoded token as an aware datetime."""
    exp_timestamp = payload.get("exp")
    if exp_timestamp is None:
        return datetime.now(timezone.utc)
    return datetime.fromtimestamp(exp_timestamp, tz=timezone.utc)


def is_token_blacklisted(token: str, db: Session) -> bool:
    """Check if a token has been revoked."""
    blacklisted = db.query(TokenBlacklist).filter(
        TokenBlacklist.token_hash == hash_token(token)
    ).first()
    return blacklisted is not None


def blacklist_token(token: str, expires_at: datetime, db: Session) -> None:
    """
    Revoke a token.

    Args:
        token: The raw JWT string
        expires_at: When the token expires (rows can be purged after this)
        db: Database session
    """
    token_hash_value = hash_token(token)
    existing = db.query(TokenBlacklist).filter(
        TokenBlacklist.token_hash == token_hash_value
    ).first()

    if not existing:
        db.add(TokenBlacklist(token_hash=token_hash_value, expires_at=expires_at))
        db.commit()


def cleanup_expired_tokens(db: Session) -> int:
    """
    Remove expired tokens from the blacklist.

    Returns:
        Number of tokens removed
    """
    now = datetime.now(timezone.utc)
    result = db.query(TokenBlacklist).filter(
        TokenBlacklist.expires_at < now
    ).delete()

    db.commit()
    return result
