"""
JWT token utilities for authentication.

This module provides functions for encoding and decoding JWT tokens.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from pvz_service.app.core.config import settings
from pvz_service.app.models.enums import UserRole


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Data payload to encode in the token (should include: sub, user_id, role)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string

    Example payload:
        {
            "sub": "3f1c...",
            "user_id": "3f1c...",
            "role": "employee",
            "iat": 1234567000,
            "exp": 1234567890
        }
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)

    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"iat": now, "exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

    return encoded_jwt


def create_user_token(user_id: str, role: UserRole) -> str:
    """Issue a token for a registered account."""
    return create_access_token(data={"sub": user_id, "user_id": user_id, "role": role.value})


def create_dummy_token(role: UserRole) -> str:
    """
    Issue a token for the requested role without any credential check.

    The subject is a fresh UUID that matches no stored account.
    """
    return create_user_token(str(uuid.uuid4()), role)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and validate a JWT access token.

    Args:
        token: JWT token string to decode

    Returns:
        Decoded token payload if valid (includes: sub, user_id, role, exp), None otherwise
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        return payload
    except JWTError:
        return None
