"""
Pickup point data access.

Plain queries against the pvz table; no business rules live here.
"""

from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from pvz_service.app.models.enums import City
from pvz_service.app.models.pvz import PVZ


async def create_pickup_point(db: AsyncSession, city: City) -> PVZ:
    """
    Insert a new pickup point registered now.

    Args:
        db: Database session (caller commits)
        city: City of the pickup point

    Returns:
        Created pickup point
    """
    pvz = PVZ(city=city, registration_date=datetime.now(timezone.utc))
    db.add(pvz)
    await db.flush()
    return pvz


async def lock_pickup_point(db: AsyncSession, pvz_id: str) -> Optional[PVZ]:
    """
    Fetch a pickup point and hold a row lock on it until the transaction ends.

    Serializes writers that open receptions for the same point. The lock is
    a no-op on SQLite.
    """
    result = await db.execute(
        select(PVZ).where(PVZ.id == pvz_id).with_for_update()
    )
    return result.scalar_one_or_none()


def _date_filters(start: Optional[datetime], end: Optional[datetime]) -> list:
    conditions = []
    if start is not None:
        conditions.append(PVZ.registration_date >= start)
    if end is not None:
        conditions.append(PVZ.registration_date <= end)
    return conditions


async def count_pickup_points(
    db: AsyncSession,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None
) -> int:
    """Count pickup points registered within [start, end] (both bounds optional, inclusive)."""
    result = await db.execute(
        select(func.count(PVZ.id)).where(*_date_filters(start, end))
    )
    return result.scalar()


async def list_pickup_points(
    db: AsyncSession,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    offset: int = 0,
    limit: int = 10
) -> Sequence[PVZ]:
    """
    Page of pickup points, most recently registered first.

    Args:
        db: Database session
        start: Inclusive lower bound on registration date
        end: Inclusive upper bound on registration date
        offset: Rows to skip
        limit: Maximum rows to return

    Returns:
        List of pickup points
    """
    query = (
        select(PVZ)
        .where(*_date_filters(start, end))
        .order_by(PVZ.registration_date.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(query)
    return result.scalars().all()
