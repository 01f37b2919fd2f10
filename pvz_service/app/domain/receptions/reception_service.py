"""
Reception Service (Domain Logic).

Opens and closes receptions while keeping at most one open reception per
pickup point. The in-service check gives a clear error message; the
partial unique index on reception(pvz_id) is what actually rejects a
concurrent second opener.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pvz_service.app.core.exceptions import ConflictError, NotFoundError, ValidationError
from pvz_service.app.db.session import transaction
from pvz_service.app.domain.principal import Principal
from pvz_service.app.models.enums import UserRole
from pvz_service.app.models.reception import Reception
from pvz_service.app.services import receptions as reception_store
from pvz_service.app.services.audit import log_event, AuditAction
from pvz_service.app.services.pickup_points import lock_pickup_point

logger = logging.getLogger(__name__)


class ReceptionService:

    @staticmethod
    async def open_reception(db: AsyncSession, principal: Principal, pvz_id: str) -> Reception:
        """
        Open a new reception at a pickup point (employee only).

        Flow:
        1. Lock the pickup point row (serializes openers on PostgreSQL)
        2. Reject if an open reception already exists
        3. Insert the reception; a unique-index violation means a concurrent
           opener won and is reported the same way as step 2

        Raises:
            ForbiddenError: Caller is not an employee
            ValidationError: Pickup point does not exist
            ConflictError: Pickup point already has an unclosed reception
        """
        principal.require(UserRole.EMPLOYEE, "open receptions")

        async with transaction(db):
            pvz = await lock_pickup_point(db, pvz_id)
            if pvz is None:
                raise ValidationError(
                    "Pickup point not found",
                    details={"pvz_id": pvz_id}
                )

            if await reception_store.has_open_reception(db, pvz_id):
                raise ConflictError(
                    "Pickup point already has an unclosed reception",
                    details={"pvz_id": pvz_id}
                )

            try:
                reception = await reception_store.create_reception(db, pvz_id)
            except IntegrityError as exc:
                logger.warning("Concurrent reception open rejected for pvz %s", pvz_id)
                raise ConflictError(
                    "Pickup point already has an unclosed reception",
                    details={"pvz_id": pvz_id}
                ) from exc

            await log_event(
                db,
                AuditAction.RECEPTION_OPENED,
                principal=principal,
                pvz_id=pvz_id,
                metadata={"reception_id": reception.id}
            )

        logger.info("Reception %s opened for pvz %s", reception.id, pvz_id)
        return reception

    @staticmethod
    async def close_last_reception(db: AsyncSession, principal: Principal, pvz_id: str) -> Reception:
        """
        Close the open reception of a pickup point.

        Any authenticated principal may close. Closing is a one-shot
        transition: a second call finds nothing open and fails.

        Raises:
            ValidationError: Missing pickup point id
            NotFoundError: No open reception for the pickup point
        """
        if not pvz_id:
            raise ValidationError("Missing pickup point id")

        async with transaction(db):
            reception = await reception_store.find_open_reception(db, pvz_id, for_update=True)
            if reception is None:
                raise NotFoundError(
                    "No open reception for this pickup point",
                    details={"pvz_id": pvz_id}
                )

            if not await reception_store.close_reception(db, reception):
                # Closed by a concurrent request between lookup and update
                raise NotFoundError(
                    "No open reception for this pickup point",
                    details={"pvz_id": pvz_id}
                )

            await log_event(
                db,
                AuditAction.RECEPTION_CLOSED,
                principal=principal,
                pvz_id=pvz_id,
                metadata={"reception_id": reception.id}
            )

        logger.info("Reception %s closed for pvz %s", reception.id, pvz_id)
        return reception

    @staticmethod
    async def list_receptions(db: AsyncSession, pvz_id: str) -> list[Reception]:
        """All receptions of a pickup point, most recent first."""
        return list(await reception_store.list_receptions_for_pickup_point(db, pvz_id))
