"""
Authentication API endpoints.

Provides dummy login, register and login endpoints.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from pvz_service.app.db.session import get_db, transaction
from pvz_service.app.domain.principal import Principal
from pvz_service.app.schemas.auth import (
    DummyLoginRequest,
    UserRegister,
    UserLogin,
    TokenResponse,
    UserResponse,
)
from pvz_service.app.core.exceptions import AuthenticationError, ValidationError
from pvz_service.app.core.security import get_password_hash, verify_password
from pvz_service.app.core.jwt import create_dummy_token, create_user_token
from pvz_service.app.services.audit import log_event, AuditAction
from pvz_service.app.services.users import create_user, get_user_by_email

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


@router.post("/dummyLogin", response_model=TokenResponse)
async def dummy_login(request: DummyLoginRequest):
    """
    Issue a token for the requested role without checking credentials.

    Intended for testing; the token subject matches no stored account.
    """
    return TokenResponse(token=create_dummy_token(request.role))


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new user.

    Emails are unique; a second registration with the same email fails with 400.
    """
    if await get_user_by_email(db, user_data.email):
        raise ValidationError("Email already registered")

    async with transaction(db):
        try:
            new_user = await create_user(
                db,
                email=user_data.email,
                password_hash=get_password_hash(user_data.password),
                role=user_data.role
            )
        except IntegrityError as exc:
            raise ValidationError("Email already registered") from exc

        await log_event(
            db,
            AuditAction.USER_REGISTERED,
            principal=Principal(subject_id=new_user.id, role=new_user.role)
        )

    logger.info("User %s registered as %s", new_user.id, new_user.role.value)
    return UserResponse.model_validate(new_user)


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """
    Login user and return JWT token.

    Logs successful and failed login attempts for security monitoring.
    """
    user = await get_user_by_email(db, credentials.email)

    if not user or not verify_password(credentials.password, user.password_hash):
        async with transaction(db):
            await log_event(
                db,
                AuditAction.LOGIN_FAILED,
                principal=Principal(subject_id=user.id, role=user.role) if user else None,
                metadata={"email": credentials.email}
            )
        raise AuthenticationError("Invalid credentials")

    async with transaction(db):
        await log_event(
            db,
            AuditAction.LOGIN_SUCCESS,
            principal=Principal(subject_id=user.id, role=user.role)
        )

    return TokenResponse(token=create_user_token(user.id, user.role))
