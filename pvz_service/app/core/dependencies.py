"""
Authentication dependencies for FastAPI.

This module provides dependencies for protecting routes with JWT authentication.
"""

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pvz_service.app.core.jwt import decode_access_token
from pvz_service.app.domain.principal import Principal
from pvz_service.app.models.enums import UserRole

# HTTP Bearer security scheme; missing headers are reported as 401 below
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Principal:
    """
    FastAPI dependency for JWT authentication.

    Tokens issued by /dummyLogin carry a subject that matches no stored
    account, so the token itself is the only source of identity.

    Args:
        credentials: HTTP Bearer token from request header

    Returns:
        Principal built from the token's subject and role

    Raises:
        HTTPException: 401 if authentication fails for any reason
    """
    if credentials is None:
        raise _unauthorized("Missing authorization token")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise _unauthorized("Could not validate credentials")

    user_id = payload.get("user_id") or payload.get("sub")
    if not user_id:
        raise _unauthorized("Invalid token payload")

    try:
        role = UserRole(payload.get("role"))
    except ValueError:
        raise _unauthorized("Invalid role in token")

    return Principal(subject_id=str(user_id), role=role)
