"""
Reception data access.

Resolves the current open reception of a pickup point and performs the
single allowed status transition. The one-open-reception invariant is
backed by a partial unique index, so a losing concurrent insert surfaces
here as IntegrityError.
"""

from datetime import datetime, timezone
from typing import Optional, Sequence, Dict, List

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pvz_service.app.models.enums import ReceptionStatus
from pvz_service.app.models.reception import Reception


async def has_open_reception(db: AsyncSession, pvz_id: str) -> bool:
    """Check whether the pickup point already has an IN_PROGRESS reception."""
    result = await db.execute(
        select(Reception.id).where(
            Reception.pvz_id == pvz_id,
            Reception.status == ReceptionStatus.IN_PROGRESS
        ).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def find_open_reception(
    db: AsyncSession,
    pvz_id: str,
    for_update: bool = False
) -> Optional[Reception]:
    """
    Find the open reception of a pickup point.

    The most recent one wins if several somehow exist.

    Args:
        db: Database session
        pvz_id: Pickup point to resolve
        for_update: Hold a row lock on the reception until the transaction ends

    Returns:
        Open reception or None
    """
    query = (
        select(Reception)
        .where(
            Reception.pvz_id == pvz_id,
            Reception.status == ReceptionStatus.IN_PROGRESS
        )
        .order_by(Reception.datetime.desc())
        .limit(1)
    )
    if for_update:
        query = query.with_for_update()

    result = await db.execute(query)
    return result.scalar_one_or_none()


async def create_reception(db: AsyncSession, pvz_id: str) -> Reception:
    """
    Insert an IN_PROGRESS reception for a pickup point.

    Raises:
        IntegrityError: If the pickup point already has an open reception
            or does not exist
    """
    reception = Reception(
        pvz_id=pvz_id,
        datetime=datetime.now(timezone.utc),
        status=ReceptionStatus.IN_PROGRESS
    )
    db.add(reception)
    await db.flush()  # Will raise IntegrityError if unique index violated
    return reception


async def close_reception(db: AsyncSession, reception: Reception) -> bool:
    """
    Transition a reception from IN_PROGRESS to CLOSE.

    The update is conditional on the current status, so a reception that
    was closed concurrently is left untouched.

    Returns:
        True if this call closed the reception, False otherwise
    """
    result = await db.execute(
        update(Reception)
        .where(
            Reception.id == reception.id,
            Reception.status == ReceptionStatus.IN_PROGRESS
        )
        .values(status=ReceptionStatus.CLOSE)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        return False

    await db.refresh(reception)
    return True


async def list_receptions_for_pickup_point(db: AsyncSession, pvz_id: str) -> Sequence[Reception]:
    """All receptions of a pickup point, any status, most recent first."""
    result = await db.execute(
        select(Reception)
        .where(Reception.pvz_id == pvz_id)
        .order_by(Reception.datetime.desc())
    )
    return result.scalars().all()


async def list_receptions_for_pickup_points(
    db: AsyncSession,
    pvz_ids: Sequence[str]
) -> Dict[str, List[Reception]]:
    """
    Receptions of several pickup points in one query.

    Returns:
        Mapping pvz_id -> receptions (most recent first); every requested id is present
    """
    grouped: Dict[str, List[Reception]] = {pvz_id: [] for pvz_id in pvz_ids}
    if not pvz_ids:
        return grouped

    result = await db.execute(
        select(Reception)
        .where(Reception.pvz_id.in_(pvz_ids))
        .order_by(Reception.datetime.desc())
    )
    for reception in result.scalars().all():
        grouped[reception.pvz_id].append(reception)
    return grouped
