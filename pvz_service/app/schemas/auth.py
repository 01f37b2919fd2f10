"""
Authentication Pydantic schemas.

Defines request and response schemas for authentication endpoints.
"""

from pydantic import BaseModel, EmailStr, Field
from pvz_service.app.models.enums import UserRole


class DummyLoginRequest(BaseModel):
    """
    Schema for a test token request.

    Used by POST /dummyLogin; no credentials are checked.
    """
    role: UserRole = Field(..., description="Role to embed in the token")


class UserRegister(BaseModel):
    """
    Schema for user registration.

    Used by POST /register endpoint.
    """
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=6, max_length=72, description="Password (6-72 characters)")
    role: UserRole = Field(..., description="User role")


class UserLogin(BaseModel):
    """
    Schema for user login.

    Used by POST /login endpoint.
    """
    email: EmailStr = Field(..., description="Registered email")
    password: str = Field(..., min_length=1, description="Password")


class TokenResponse(BaseModel):
    """JWT returned by /dummyLogin and /login."""
    token: str = Field(..., description="JWT access token")


class UserResponse(BaseModel):
    """Registered account (no credentials)."""
    id: str
    email: str
    role: UserRole

    class Config:
        from_attributes = True
