"""
Audit logging service.

Records pickup point, reception and product changes and authentication
events. Entries are written inside the caller's transaction so they commit
or roll back together with the change they describe.
"""

from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from pvz_service.app.models.audit_log import AuditLog
from pvz_service.app.domain.principal import Principal


# Audit event constants
class AuditAction:
    """Standardized audit action constants."""
    USER_REGISTERED = "USER_REGISTERED"
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"

    PVZ_CREATED = "PVZ_CREATED"

    RECEPTION_OPENED = "RECEPTION_OPENED"
    RECEPTION_CLOSED = "RECEPTION_CLOSED"

    PRODUCT_ADDED = "PRODUCT_ADDED"
    PRODUCT_DELETED = "PRODUCT_DELETED"


async def log_event(
    db: AsyncSession,
    action: str,
    principal: Optional[Principal] = None,
    pvz_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """
    Add an event to the audit log.

    Args:
        db: Database session (caller commits)
        action: Action being performed (use AuditAction constants)
        principal: Caller performing the action, if known
        pvz_id: Pickup point concerned, if any
        metadata: Additional context as JSON

    Returns:
        Created AuditLog instance
    """
    audit_log = AuditLog(
        actor_id=principal.subject_id if principal else None,
        actor_role=principal.role.value if principal else None,
        action=action,
        pvz_id=pvz_id,
        meta_data=metadata
    )

    db.add(audit_log)
    await db.flush()

    return audit_log


async def get_audit_trail(
    db: AsyncSession,
    pvz_id: Optional[str] = None,
    action: Optional[str] = None,
    limit: int = 100
) -> list[AuditLog]:
    """
    Retrieve audit trail with optional filtering.

    Args:
        db: Database session
        pvz_id: Filter by pickup point
        action: Filter by action type
        limit: Maximum number of records to return

    Returns:
        List of AuditLog instances, most recent first
    """
    query = select(AuditLog).order_by(desc(AuditLog.timestamp), desc(AuditLog.id))

    if pvz_id:
        query = query.where(AuditLog.pvz_id == pvz_id)

    if action:
        query = query.where(AuditLog.action == action)

    query = query.limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all())
