"""
Product Service (Domain Logic).

Products are only ever added to, and removed from, the tail of the open
reception of a pickup point. Clients name a pickup point, never a
reception or a product.
"""

import logging
from typing import Union

from sqlalchemy.ext.asyncio import AsyncSession

from pvz_service.app.core.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from pvz_service.app.db.session import transaction
from pvz_service.app.domain.principal import Principal
from pvz_service.app.models.enums import ProductType, UserRole
from pvz_service.app.models.product import Product
from pvz_service.app.models.reception import Reception
from pvz_service.app.services import products as product_store
from pvz_service.app.services.audit import log_event, AuditAction
from pvz_service.app.services.receptions import find_open_reception

logger = logging.getLogger(__name__)


async def _resolve_open_reception(db: AsyncSession, pvz_id: str) -> Reception:
    reception = await find_open_reception(db, pvz_id, for_update=True)
    if reception is None:
        raise NotFoundError(
            "No active reception for this pickup point",
            details={"pvz_id": pvz_id}
        )
    if not reception.is_open:
        raise ConflictError(
            "Reception is already closed",
            details={"reception_id": reception.id}
        )
    return reception


class ProductService:

    @staticmethod
    async def add_product(
        db: AsyncSession,
        principal: Principal,
        pvz_id: str,
        product_type: Union[ProductType, str]
    ) -> Product:
        """
        Append a product to the open reception of a pickup point (employee only).

        Raises:
            ForbiddenError: Caller is not an employee
            ValidationError: Unknown product type
            NotFoundError: No active reception for the pickup point
            ConflictError: Resolved reception is closed
        """
        principal.require(UserRole.EMPLOYEE, "add products")

        try:
            product_type = ProductType(product_type)
        except ValueError:
            raise ValidationError(
                f"Invalid product type: {product_type}",
                details={"allowed": [t.value for t in ProductType]}
            )

        async with transaction(db):
            reception = await _resolve_open_reception(db, pvz_id)
            product = await product_store.add_product(db, reception.id, product_type)

            await log_event(
                db,
                AuditAction.PRODUCT_ADDED,
                principal=principal,
                pvz_id=pvz_id,
                metadata={
                    "reception_id": reception.id,
                    "product_id": product.id,
                    "type": product_type.value
                }
            )

        logger.info("Product %s (%s) added to reception %s", product.id, product_type.value, reception.id)
        return product

    @staticmethod
    async def delete_last_product(db: AsyncSession, principal: Principal, pvz_id: str) -> Product:
        """
        Remove the most recently added product of the open reception (employee only).

        Only the tail can be removed; earlier products stay until everything
        after them is gone.

        Raises:
            ForbiddenError: Caller is not an employee
            ValidationError: Missing pickup point id
            NotFoundError: No active reception, or the reception has no products
            ConflictError: Resolved reception is closed
            InternalError: The product vanished between lookup and delete
        """
        principal.require(UserRole.EMPLOYEE, "delete products")

        if not pvz_id:
            raise ValidationError("Missing pickup point id")

        async with transaction(db):
            reception = await _resolve_open_reception(db, pvz_id)

            product = await product_store.find_last_product(db, reception.id)
            if product is None:
                raise NotFoundError(
                    "No products to delete in this reception",
                    details={"reception_id": reception.id}
                )

            deleted = await product_store.delete_product(db, product.id)
            if deleted == 0:
                logger.warning("Product %s was deleted concurrently", product.id)
                raise InternalError(
                    "Failed to delete product",
                    details={"product_id": product.id}
                )

            await log_event(
                db,
                AuditAction.PRODUCT_DELETED,
                principal=principal,
                pvz_id=pvz_id,
                metadata={"reception_id": reception.id, "product_id": product.id}
            )

        logger.info("Product %s removed from reception %s", product.id, reception.id)
        return product
