"""
Domain service tests.

Calls the services directly with an explicit Principal, no HTTP involved.
"""

import pytest
from sqlalchemy import select, func

from pvz_service.app.core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from pvz_service.app.domain.pickup_points.pickup_point_service import (
    PickupPointService,
    parse_date_filter,
)
from pvz_service.app.domain.receptions.product_service import ProductService
from pvz_service.app.domain.receptions.reception_service import ReceptionService
from pvz_service.app.models.enums import City, ProductType, ReceptionStatus
from pvz_service.app.models.product import Product
from pvz_service.app.models.reception import Reception
from pvz_service.app.services.audit import get_audit_trail, AuditAction


@pytest.fixture
async def point_id(db_session, moderator):
    point = await PickupPointService.create_pickup_point(db_session, moderator, City.MOSCOW)
    return point.id


@pytest.mark.asyncio
async def test_create_pickup_point_requires_moderator(db_session, employee):
    with pytest.raises(ForbiddenError):
        await PickupPointService.create_pickup_point(db_session, employee, City.KAZAN)


@pytest.mark.asyncio
async def test_create_pickup_point_rejects_unknown_city(db_session, moderator):
    with pytest.raises(ValidationError):
        await PickupPointService.create_pickup_point(db_session, moderator, "Paris")


@pytest.mark.asyncio
async def test_single_open_reception_per_point(db_session, employee, point_id):
    await ReceptionService.open_reception(db_session, employee, point_id)

    with pytest.raises(ConflictError):
        await ReceptionService.open_reception(db_session, employee, point_id)

    count = await db_session.execute(
        select(func.count(Reception.id)).where(
            Reception.pvz_id == point_id,
            Reception.status == ReceptionStatus.IN_PROGRESS
        )
    )
    assert count.scalar() == 1


@pytest.mark.asyncio
async def test_delete_last_product_is_lifo(db_session, employee, point_id):
    await ReceptionService.open_reception(db_session, employee, point_id)
    added = [
        await ProductService.add_product(db_session, employee, point_id, product_type)
        for product_type in [ProductType.ELECTRONICS, ProductType.CLOTHES, ProductType.SHOES, ProductType.SHOES]
    ]

    removed = []
    for _ in range(len(added)):
        removed.append(await ProductService.delete_last_product(db_session, employee, point_id))

    assert [p.id for p in removed] == [p.id for p in reversed(added)]

    with pytest.raises(NotFoundError):
        await ProductService.delete_last_product(db_session, employee, point_id)


@pytest.mark.asyncio
async def test_closed_reception_is_terminal(db_session, employee, moderator, point_id):
    reception = await ReceptionService.open_reception(db_session, employee, point_id)
    reception_id = reception.id
    await ProductService.add_product(db_session, employee, point_id, "electronics")

    closed = await ReceptionService.close_last_reception(db_session, moderator, point_id)
    assert closed.id == reception_id
    assert closed.status == ReceptionStatus.CLOSE

    with pytest.raises(NotFoundError):
        await ProductService.add_product(db_session, employee, point_id, "shoes")
    with pytest.raises(NotFoundError):
        await ProductService.delete_last_product(db_session, employee, point_id)
    with pytest.raises(NotFoundError):
        await ReceptionService.close_last_reception(db_session, employee, point_id)

    products = await db_session.execute(
        select(func.count(Product.id)).where(Product.reception_id == reception_id)
    )
    assert products.scalar() == 1


@pytest.mark.asyncio
async def test_product_operations_require_employee(db_session, employee, moderator, point_id):
    await ReceptionService.open_reception(db_session, employee, point_id)

    with pytest.raises(ForbiddenError):
        await ProductService.add_product(db_session, moderator, point_id, "shoes")
    with pytest.raises(ForbiddenError):
        await ProductService.delete_last_product(db_session, moderator, point_id)
    with pytest.raises(ForbiddenError):
        await ReceptionService.open_reception(db_session, moderator, point_id)


@pytest.mark.asyncio
async def test_add_product_rejects_unknown_type(db_session, employee, point_id):
    await ReceptionService.open_reception(db_session, employee, point_id)

    with pytest.raises(ValidationError):
        await ProductService.add_product(db_session, employee, point_id, "furniture")


@pytest.mark.asyncio
async def test_delete_last_product_requires_pvz_id(db_session, employee):
    with pytest.raises(ValidationError):
        await ProductService.delete_last_product(db_session, employee, "")


@pytest.mark.asyncio
async def test_list_receptions_most_recent_first(db_session, employee, point_id):
    first = await ReceptionService.open_reception(db_session, employee, point_id)
    await ReceptionService.close_last_reception(db_session, employee, point_id)
    second = await ReceptionService.open_reception(db_session, employee, point_id)

    receptions = await ReceptionService.list_receptions(db_session, point_id)

    assert [r.id for r in receptions] == [second.id, first.id]


@pytest.mark.asyncio
async def test_list_pickup_points_validates_bounds(db_session):
    with pytest.raises(ValidationError):
        await PickupPointService.list_pickup_points(db_session, page=0)
    with pytest.raises(ValidationError):
        await PickupPointService.list_pickup_points(db_session, limit=31)


@pytest.mark.asyncio
async def test_state_changes_are_audited(db_session, employee, point_id):
    await ReceptionService.open_reception(db_session, employee, point_id)
    await ProductService.add_product(db_session, employee, point_id, "clothes")
    await ProductService.delete_last_product(db_session, employee, point_id)
    await ReceptionService.close_last_reception(db_session, employee, point_id)

    trail = await get_audit_trail(db_session, pvz_id=point_id)

    assert [entry.action for entry in trail] == [
        AuditAction.RECEPTION_CLOSED,
        AuditAction.PRODUCT_DELETED,
        AuditAction.PRODUCT_ADDED,
        AuditAction.RECEPTION_OPENED,
        AuditAction.PVZ_CREATED,
    ]
    assert trail[0].actor_id == employee.subject_id


@pytest.mark.asyncio
async def test_failed_operation_leaves_no_audit_entry(db_session, employee, point_id):
    with pytest.raises(NotFoundError):
        await ProductService.add_product(db_session, employee, point_id, "clothes")

    trail = await get_audit_trail(db_session, action=AuditAction.PRODUCT_ADDED)
    assert trail == []


@pytest.mark.parametrize("value, expected_none", [
    ("2025-01-01T00:00:00Z", False),
    ("2025-01-01T03:00:00+03:00", False),
    ("2025-01-01", False),
    ("not-a-date", True),
    ("", True),
    (None, True),
])
@pytest.mark.asyncio
async def test_parse_date_filter(value, expected_none):
    parsed = parse_date_filter(value)
    assert (parsed is None) == expected_none
    if parsed is not None:
        assert parsed.utcoffset().total_seconds() == 0
