"""
Product data access.

Products of a reception form an append-ordered sequence keyed by their
creation timestamp; the tail is the product with the latest timestamp.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence, Dict, List

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from pvz_service.app.models.enums import ProductType
from pvz_service.app.models.product import Product


async def add_product(db: AsyncSession, reception_id: str, product_type: ProductType) -> Product:
    """
    Append a product to a reception.

    Timestamps are strictly increasing within a reception so the tail is
    unambiguous. Callers hold the reception row lock.
    """
    created_at = datetime.now(timezone.utc)
    previous = await find_last_product(db, reception_id)
    if previous is not None:
        previous_at = previous.datetime
        if previous_at.tzinfo is None:
            previous_at = previous_at.replace(tzinfo=timezone.utc)
        if created_at <= previous_at:
            created_at = previous_at + timedelta(microseconds=1)

    product = Product(
        reception_id=reception_id,
        type=product_type,
        datetime=created_at
    )
    db.add(product)
    await db.flush()
    return product


async def find_last_product(db: AsyncSession, reception_id: str) -> Optional[Product]:
    """The most recently created product of a reception, or None if it has none."""
    result = await db.execute(
        select(Product)
        .where(Product.reception_id == reception_id)
        .order_by(Product.datetime.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def delete_product(db: AsyncSession, product_id: str) -> int:
    """
    Delete a product by id.

    Returns:
        Number of rows removed (0 if another request deleted it first)
    """
    result = await db.execute(
        delete(Product)
        .where(Product.id == product_id)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


async def list_products_for_reception(db: AsyncSession, reception_id: str) -> Sequence[Product]:
    """All products of a reception, most recent first."""
    result = await db.execute(
        select(Product)
        .where(Product.reception_id == reception_id)
        .order_by(Product.datetime.desc())
    )
    return result.scalars().all()


async def list_products_for_receptions(
    db: AsyncSession,
    reception_ids: Sequence[str]
) -> Dict[str, List[Product]]:
    """
    Products of several receptions in one query.

    Returns:
        Mapping reception_id -> products (most recent first); every requested id is present
    """
    grouped: Dict[str, List[Product]] = {reception_id: [] for reception_id in reception_ids}
    if not reception_ids:
        return grouped

    result = await db.execute(
        select(Product)
        .where(Product.reception_id.in_(reception_ids))
        .order_by(Product.datetime.desc())
    )
    for product in result.scalars().all():
        grouped[product.reception_id].append(product)
    return grouped
