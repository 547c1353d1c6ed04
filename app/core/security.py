"""
Security utilities for authentication

Passwords are hashed with argon2; bcrypt hashes from imported accounts
still verify. Tokens are JWTs whose claims follow this contract:

    sub   user id (string, as JWT requires)
    type  "ACCESS" or "REFRESH"
    jti   unique token id, used by the revocation list
    exp   expiry timestamp
"""
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import bcrypt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from jose import JWTError, jwt

from app.core.config import settings

logger = logging.getLogger(__name__)

TOKEN_TYPE_ACCESS = "ACCESS"
TOKEN_TYPE_REFRESH = "REFRESH"

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a password with argon2"""
    return _hasher.hash(password)


def validate_password(password: str) -> str:
    """
    Validate and normalize password for hashing

    Args:
        password: Raw password string

    Returns:
        Normalized password (trimmed)

    Raises:
        ValueError: If password is invalid with specific error message
    """
    if password is None:
        raise ValueError("Password is required")

    password = password.strip()

    if not password:
        raise ValueError("Password cannot be empty")

    if len(password) < 6:
        raise ValueError("Password must be at least 6 characters")

    if len(password.encode("utf-8")) > 72:
        raise ValueError("Password cannot be longer than 72 bytes when encoded as UTF-8")

    return password


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against an argon2 or bcrypt hash"""
    if not hashed_password:
        return False

    if hashed_password.startswith("$argon2"):
        try:
            return _hasher.verify(hashed_password, plain_password)
        except (VerificationError, InvalidHashError):
            return False

    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        logger.warning("Unrecognised password hash format")
        return False


def _create_token(subject: str, token_type: str, expires_minutes: int) -> str:
    now = datetime.now(timezone.utc)
    to_encode = {
        "sub": subject,
        "type": token_type,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(user_id: int, expires_minutes: Optional[int] = None) -> str:
    """Create a JWT access token"""
    if expires_minutes is None:
        expires_minutes = settings.JWT_ACCESS_TTL_MINUTES
    return _create_token(str(user_id), TOKEN_TYPE_ACCESS, expires_minutes)


def create_refresh_token(user_id: int, expires_minutes: Optional[int] = None) -> str:
    """Create a JWT refresh token"""
    if expires_minutes is None:
        expires_minutes = settings.JWT_REFRESH_TTL_MINUTES
    return _create_token(str(user_id), TOKEN_TYPE_REFRESH, expires_minutes)


def decode_token(token: str) -> Dict:
    """Decode and verify a JWT token (signature and expiry)"""
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        raise ValueError("Invalid token")
