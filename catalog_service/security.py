"""
Security utilities for authentication.

Provides password hashing and JWT token generation and validation. Secrets and
algorithm choices are passed in by the caller; nothing here reads configuration.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from .exceptions import ValidationException
from .logging_config import get_logger

logger = get_logger(__name__)

# bcrypt only considers the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


# ==================== PASSWORD HASHING ====================


def hash_password(password: str, rounds: int = 12) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password
        rounds: bcrypt cost factor

    Returns:
        Hashed password string

    Raises:
        ValidationException: If the password exceeds bcrypt's input limit
    """
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > BCRYPT_MAX_BYTES:
        raise ValidationException(
            f"Password must be at most {BCRYPT_MAX_BYTES} bytes", field="password"
        )
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash in constant time.

    Args:
        password: Plain text password to verify
        hashed_password: Stored hash to verify against

    Returns:
        True if password matches, False otherwise
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError as e:
        logger.warning("Password verification failed", error=str(e))
        return False


# ==================== JWT TOKENS ====================


def create_access_token(
    user_id: str,
    secret_key: str,
    algorithm: str = "HS256",
    expire_minutes: int = 60,
) -> str:
    """
    Create a JWT access token.

    Args:
        user_id: Subject of the token
        secret_key: Signing secret
        algorithm: JWT signing algorithm
        expire_minutes: Token lifetime

    Returns:
        Encoded JWT access token
    """
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=expire_minutes)

    payload = {
        "sub": user_id,
        "type": "access",
        "iat": now,
        "exp": expire,
    }

    token = jwt.encode(payload, secret_key, algorithm=algorithm)

    logger.debug("Created access token", user_id=user_id, expires_at=expire.isoformat())
    return token


def decode_access_token(
    token: str, secret_key: str, algorithm: str = "HS256"
) -> Optional[Dict[str, Any]]:
    """
    Decode and validate a JWT access token.

    Args:
        token: JWT token string
        secret_key: Signing secret
        algorithm: Expected signing algorithm

    Returns:
        Decoded payload if valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            secret_key,
            algorithms=[algorithm],
            options={"require": ["sub", "exp", "iat"]},
        )
    except ExpiredSignatureError:
        logger.debug("Access token expired")
        return None
    except InvalidTokenError as e:
        logger.warning("Invalid access token", error=str(e))
        return None

    if payload.get("type") != "access":
        logger.warning("Invalid token type")
        return None
    if not isinstance(payload.get("sub"), str) or not payload["sub"]:
        logger.warning("Token subject missing")
        return None

    return payload


def get_token_from_header(authorization: Optional[str]) -> Optional[str]:
    """
    Extract Bearer token from Authorization header.

    Args:
        authorization: Authorization header value

    Returns:
        Token string if valid Bearer format, None otherwise
    """
    if not authorization:
        return None

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return parts[1]
