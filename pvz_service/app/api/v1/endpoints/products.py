"""
Product API endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from pvz_service.app.core.dependencies import get_current_user
from pvz_service.app.db.session import get_db
from pvz_service.app.domain.principal import Principal
from pvz_service.app.domain.receptions.product_service import ProductService
from pvz_service.app.schemas.pvz import ProductCreate, ProductResponse

router = APIRouter(prefix="/products", tags=["Products"])


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def add_product(
    product_data: ProductCreate,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Add a product to the open reception of a pickup point (employee only).

    The reception is resolved from the pickup point; clients never name it.
    """
    product = await ProductService.add_product(
        db, current_user, str(product_data.pvz_id), product_data.type
    )
    return ProductResponse.from_model(product)
