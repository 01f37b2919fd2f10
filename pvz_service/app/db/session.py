"""
Database session configuration.

This module handles database engine creation and session management
using SQLAlchemy with async support for PostgreSQL.
"""

from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from pvz_service.app.core.config import settings


def _engine_options() -> dict:
    options = {"echo": settings.db_echo, "future": True}
    # SQLite (tests, local runs) does not accept QueuePool sizing
    if not settings.database_url.startswith("sqlite"):
        options["pool_size"] = settings.db_pool_size
        options["max_overflow"] = settings.db_max_overflow
    return options


# Create async engine
engine = create_async_engine(settings.database_url, **_engine_options())

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Create declarative base for models
Base = declarative_base()


async def get_db():
    """
    FastAPI dependency for database sessions.

    Yields an async database session and ensures it's properly closed.
    Anything left uncommitted when the request ends is rolled back.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def transaction(db: AsyncSession):
    """
    Run a multi-statement sequence as one unit of work.

    Commits when the block exits normally; rolls back on any exception,
    including task cancellation, so no partial state is left behind.
    """
    try:
        yield db
        await db.commit()
    except BaseException:
        await db.rollback()
        raise
