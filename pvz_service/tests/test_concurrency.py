"""
Concurrency Tests.

Validates that races on the reception invariants are handled correctly.
A single in-memory SQLite connection cannot interleave two transactions,
so the losing side of each race is simulated.
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from pvz_service.app.core.exceptions import ConflictError, InternalError
from pvz_service.app.domain.pickup_points.pickup_point_service import PickupPointService
from pvz_service.app.domain.receptions.product_service import ProductService
from pvz_service.app.domain.receptions.reception_service import ReceptionService
from pvz_service.app.models.enums import City, ReceptionStatus
from pvz_service.app.models.reception import Reception
from pvz_service.app.services import products as product_store
from pvz_service.app.services import receptions as reception_store


@pytest.fixture
async def point_id(db_session, moderator):
    point = await PickupPointService.create_pickup_point(db_session, moderator, City.KAZAN)
    return point.id


@pytest.mark.asyncio
async def test_unique_index_rejects_second_open_reception(db_session, employee, point_id):
    """The storage layer refuses a second open reception even without the service check."""
    await ReceptionService.open_reception(db_session, employee, point_id)

    db_session.add(Reception(
        pvz_id=point_id,
        datetime=datetime.now(timezone.utc),
        status=ReceptionStatus.IN_PROGRESS
    ))
    with pytest.raises(IntegrityError):
        await db_session.flush()
    await db_session.rollback()


@pytest.mark.asyncio
async def test_unique_index_allows_many_closed_receptions(db_session, employee, point_id):
    for _ in range(3):
        await ReceptionService.open_reception(db_session, employee, point_id)
        await ReceptionService.close_last_reception(db_session, employee, point_id)

    receptions = await ReceptionService.list_receptions(db_session, point_id)
    assert len(receptions) == 3
    assert all(r.status == ReceptionStatus.CLOSE for r in receptions)


@pytest.mark.asyncio
async def test_lost_open_race_reports_conflict(db_session, employee, point_id, monkeypatch):
    """A concurrent opener that passed the check is stopped by the index."""
    await ReceptionService.open_reception(db_session, employee, point_id)

    async def check_passed(db, pvz_id):
        return False

    monkeypatch.setattr(reception_store, "has_open_reception", check_passed)

    with pytest.raises(ConflictError):
        await ReceptionService.open_reception(db_session, employee, point_id)

    receptions = await ReceptionService.list_receptions(db_session, point_id)
    assert len(receptions) == 1


@pytest.mark.asyncio
async def test_lost_delete_race_reports_internal_error(db_session, employee, point_id, monkeypatch):
    """Zero rows affected on delete is never reported as success."""
    await ReceptionService.open_reception(db_session, employee, point_id)
    product = await ProductService.add_product(db_session, employee, point_id, "shoes")
    product_id, reception_id = product.id, product.reception_id

    async def already_deleted(db, product_id):
        return 0

    monkeypatch.setattr(product_store, "delete_product", already_deleted)

    with pytest.raises(InternalError):
        await ProductService.delete_last_product(db_session, employee, point_id)

    monkeypatch.undo()
    last = await product_store.find_last_product(db_session, reception_id)
    assert last.id == product_id
