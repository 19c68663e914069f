"""
Credential helpers for accounts and protected pastes.

This module provides:
- Password hashing with Argon2id (accounts and paste passwords)
- Session token issuance and validation (HS256 JWT)
- Short ID generation for public paste references
"""

import logging
import secrets
import string
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

from argon2 import PasswordHasher
from argon2.exceptions import (
    InvalidHashError,
    VerificationError,
    VerifyMismatchError,
)
from jose import JWTError, jwt

from pasteit.core.config import settings

logger = logging.getLogger(__name__)


# =============================================================================
# Password Hashing with Argon2id
# =============================================================================
# Used for both account secrets and paste passwords. Memory-hard and salted,
# with the work factor tunable through settings.
# =============================================================================

pwd_hasher = PasswordHasher(
    time_cost=settings.argon2_time_cost,
    memory_cost=settings.argon2_memory_cost,
    parallelism=settings.argon2_parallelism,
    hash_len=32,
    salt_len=16,
)


def hash_password(password: str) -> str:
    """
    Hash a password using Argon2id.

    Args:
        password: Plain text password to hash

    Returns:
        Argon2id hash string (includes algorithm, parameters, salt, and hash)

    Example:
        >>> hashed = hash_password("my_secure_password")
        >>> # Returns: $argon2id$v=19$m=65536,t=2,p=4$...
    """
    return pwd_hasher.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Verify a password against an Argon2id hash.

    Never raises: a malformed hash is treated as a mismatch.

    Args:
        password: Plain text password to verify
        hashed_password: Argon2id hash to verify against

    Returns:
        True if password matches hash, False otherwise
    """
    try:
        pwd_hasher.verify(hashed_password, password)
        return True
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


# =============================================================================
# Session Tokens
# =============================================================================
# A session token binds account id, username and role for a fixed lifetime
# (settings.session_token_expire_days, 7 days by default).
# =============================================================================

ALGORITHM = "HS256"

TOKEN_TYPE_SESSION = "session"


def create_session_token(
    account_id: uuid.UUID | str,
    username: str,
    role: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed session token for an account.

    Args:
        account_id: Account identity (stored in the 'sub' claim)
        username: Account username
        role: Account role ("user" or "admin")
        expires_delta: Optional custom lifetime. If None,
                      uses settings.session_token_expire_days

    Returns:
        Encoded JWT token string

    Example:
        >>> token = create_session_token(account.id, "alice", "user")
    """
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(days=settings.session_token_expire_days)

    claims: dict[str, Any] = {
        "sub": str(account_id),
        "username": username,
        "role": role,
        "iat": now,
        "exp": now + expires_delta,
        "type": TOKEN_TYPE_SESSION,
        "jti": str(uuid.uuid4()),
    }

    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a session token.

    Verifies signature, expiration and format.

    Args:
        token: JWT token string to decode

    Returns:
        Dictionary of token claims

    Raises:
        JWTError: If token is invalid, expired, or malformed
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        raise


def verify_token_type(token_data: dict[str, Any], expected_type: str) -> bool:
    """Check the 'type' claim of decoded token data."""
    return token_data.get("type") == expected_type


# =============================================================================
# Short IDs
# =============================================================================

SHORT_ID_ALPHABET = string.ascii_letters + string.digits


def generate_short_id(length: int | None = None) -> str:
    """
    Generate a random public identifier for a paste.

    With the default length of 8 over 62 symbols the space is ~2.2e14,
    so collisions are rare; the unique constraint on short_id catches the rest.

    Args:
        length: Number of characters. If None, uses settings.short_id_length

    Returns:
        Random alphanumeric string
    """
    length = length or settings.short_id_length
    return "".join(secrets.choice(SHORT_ID_ALPHABET) for _ in range(length))
