"""
Pickup Point Service (Domain Logic).

Registers pickup points and lists them with their full reception and
product tree.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from pvz_service.app.core.config import settings
from pvz_service.app.core.exceptions import ValidationError
from pvz_service.app.db.session import transaction
from pvz_service.app.domain.principal import Principal
from pvz_service.app.models.enums import City, UserRole
from pvz_service.app.models.product import Product
from pvz_service.app.models.pvz import PVZ
from pvz_service.app.models.reception import Reception
from pvz_service.app.services import pickup_points as pvz_store
from pvz_service.app.services.audit import log_event, AuditAction
from pvz_service.app.services.products import list_products_for_receptions
from pvz_service.app.services.receptions import list_receptions_for_pickup_points

logger = logging.getLogger(__name__)


@dataclass
class ReceptionTree:
    reception: Reception
    products: List[Product] = field(default_factory=list)


@dataclass
class PickupPointTree:
    pvz: PVZ
    receptions: List[ReceptionTree] = field(default_factory=list)


@dataclass
class PickupPointPage:
    items: List[PickupPointTree]
    total: int
    page: int
    limit: int


def parse_date_filter(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an RFC 3339 date filter.

    Malformed values yield None so the filter is simply not applied.
    Naive values are taken as UTC.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Ignoring malformed date filter %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class PickupPointService:

    @staticmethod
    async def create_pickup_point(db: AsyncSession, principal: Principal, city: Union[City, str]) -> PVZ:
        """
        Register a pickup point (moderator only).

        Raises:
            ForbiddenError: Caller is not a moderator
            ValidationError: City is not supported
        """
        principal.require(UserRole.MODERATOR, "create pickup points")

        try:
            city = City(city)
        except ValueError:
            raise ValidationError(
                f"Unsupported city: {city}",
                details={"allowed": [c.value for c in City]}
            )

        async with transaction(db):
            pvz = await pvz_store.create_pickup_point(db, city)
            await log_event(
                db,
                AuditAction.PVZ_CREATED,
                principal=principal,
                pvz_id=pvz.id,
                metadata={"city": city.value}
            )

        logger.info("Pickup point %s registered in %s", pvz.id, city.value)
        return pvz

    @staticmethod
    async def list_pickup_points(
        db: AsyncSession,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None
    ) -> PickupPointPage:
        """
        Page of pickup points, newest registration first, each with its
        receptions (newest first) and their products (newest first).

        Args:
            db: Database session
            start_date: Inclusive lower bound on registration date (RFC 3339, ignored if malformed)
            end_date: Inclusive upper bound on registration date (RFC 3339, ignored if malformed)
            page: 1-based page number
            limit: Page size, 1..pvz_page_size_max

        Returns:
            PickupPointPage with the total count of matching pickup points
        """
        if limit is None:
            limit = settings.pvz_page_size_default
        if page < 1:
            raise ValidationError("page must be >= 1", details={"page": page})
        if not 1 <= limit <= settings.pvz_page_size_max:
            raise ValidationError(
                f"limit must be between 1 and {settings.pvz_page_size_max}",
                details={"limit": limit}
            )

        start = parse_date_filter(start_date)
        end = parse_date_filter(end_date)

        total = await pvz_store.count_pickup_points(db, start, end)
        points = await pvz_store.list_pickup_points(
            db, start, end, offset=(page - 1) * limit, limit=limit
        )

        receptions_by_pvz = await list_receptions_for_pickup_points(db, [p.id for p in points])
        reception_ids = [r.id for receptions in receptions_by_pvz.values() for r in receptions]
        products_by_reception = await list_products_for_receptions(db, reception_ids)

        items = [
            PickupPointTree(
                pvz=point,
                receptions=[
                    ReceptionTree(reception=reception, products=products_by_reception[reception.id])
                    for reception in receptions_by_pvz[point.id]
                ]
            )
            for point in points
        ]

        return PickupPointPage(items=items, total=total, page=page, limit=limit)
