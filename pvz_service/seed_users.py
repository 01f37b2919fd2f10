"""
Database seeding script for initial users.

Creates one EMPLOYEE and one MODERATOR account for local development.
Run this script after database is set up but before first use.
"""

import asyncio

from pvz_service.app.db.session import AsyncSessionLocal, Base, engine
from pvz_service.app.models.enums import UserRole
from pvz_service.app.core.security import get_password_hash
from pvz_service.app.services.users import create_user, get_user_by_email

# Registered with Base for create_all
from pvz_service.app.models.user import User
from pvz_service.app.models.audit_log import AuditLog
from pvz_service.app.models.pvz import PVZ
from pvz_service.app.models.reception import Reception
from pvz_service.app.models.product import Product

SEED_USERS = [
    ("employee@pvz-service.ru", "employee123", UserRole.EMPLOYEE),
    ("moderator@pvz-service.ru", "moderator123", UserRole.MODERATOR),
]


async def seed_users():
    """
    Seed initial users with different roles.

    Existing accounts are left untouched.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print("Starting user seeding...")

        for email, password, role in SEED_USERS:
            if await get_user_by_email(db, email):
                print(f"  {role.value} user {email} already exists, skipping")
                continue

            await create_user(db, email, get_password_hash(password), role)
            print(f"  Created {role.value} user ({email} / {password})")

        await db.commit()

    await engine.dispose()
    print("User seeding completed.")


if __name__ == "__main__":
    asyncio.run(seed_users())
