"""
Pickup point API endpoints.

Registration and listing of pickup points, plus the per-point reception
and product tail operations addressed by pickup point id.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from pvz_service.app.core.config import settings
from pvz_service.app.core.dependencies import get_current_user
from pvz_service.app.db.session import get_db
from pvz_service.app.domain.pickup_points.pickup_point_service import PickupPointService
from pvz_service.app.domain.principal import Principal
from pvz_service.app.domain.receptions.product_service import ProductService
from pvz_service.app.domain.receptions.reception_service import ReceptionService
from pvz_service.app.schemas.pvz import (
    PVZCreate,
    PVZResponse,
    PVZWithReceptions,
    ReceptionResponse,
)

router = APIRouter(prefix="/pvz", tags=["PVZ"])


@router.post("", response_model=PVZResponse, status_code=status.HTTP_201_CREATED)
async def create_pvz(
    pvz_data: PVZCreate,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Register a pickup point (moderator only)."""
    pvz = await PickupPointService.create_pickup_point(db, current_user, pvz_data.city)
    return PVZResponse.from_model(pvz)


@router.get("", response_model=List[PVZWithReceptions])
async def list_pvz(
    response: Response,
    start_date: Optional[str] = Query(None, alias="startDate", description="RFC 3339 lower bound"),
    end_date: Optional[str] = Query(None, alias="endDate", description="RFC 3339 upper bound"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(
        settings.pvz_page_size_default, ge=1, le=settings.pvz_page_size_max, description="Items per page"
    ),
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    List pickup points with their receptions and products.

    Malformed dates are ignored rather than rejected. The total number of
    matching pickup points is returned in the X-Total-Count header.
    """
    result = await PickupPointService.list_pickup_points(
        db, start_date=start_date, end_date=end_date, page=page, limit=limit
    )
    response.headers["X-Total-Count"] = str(result.total)
    return [PVZWithReceptions.from_tree(item) for item in result.items]


@router.post("/{pvz_id}/close_last_reception", response_model=ReceptionResponse)
async def close_last_reception(
    pvz_id: UUID,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Close the open reception of a pickup point."""
    reception = await ReceptionService.close_last_reception(db, current_user, str(pvz_id))
    return ReceptionResponse.from_model(reception)


@router.post("/{pvz_id}/delete_last_product", status_code=status.HTTP_200_OK)
async def delete_last_product(
    pvz_id: UUID,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete the most recently added product of the open reception (employee only)."""
    await ProductService.delete_last_product(db, current_user, str(pvz_id))
    return Response(status_code=status.HTTP_200_OK)
