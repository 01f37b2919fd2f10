"""
User account data access.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pvz_service.app.models.enums import UserRole
from pvz_service.app.models.user import User


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, email: str, password_hash: str, role: UserRole) -> User:
    """
    Insert a user account.

    Raises:
        IntegrityError: If the email is already registered
    """
    user = User(email=email, password_hash=password_hash, role=role)
    db.add(user)
    await db.flush()
    return user
