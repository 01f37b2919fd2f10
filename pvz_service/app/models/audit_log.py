"""
Audit Log Database Model.

Tracks pickup point, reception and product changes plus authentication events.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from pvz_service.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model.

    Events logged:
    - PVZ_CREATED
    - RECEPTION_OPENED / RECEPTION_CLOSED
    - PRODUCT_ADDED / PRODUCT_DELETED
    - USER_REGISTERED / LOGIN_SUCCESS / LOGIN_FAILED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action (token subject; None for anonymous attempts)
    actor_id = Column(String(36), index=True, nullable=True)
    actor_role = Column(String(20), nullable=True)

    # What action was performed
    action = Column(String(100), nullable=False, index=True)

    # Which pickup point the action concerns, when applicable
    pvz_id = Column(String(36), index=True, nullable=True)

    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)

    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', actor={self.actor_id}, pvz={self.pvz_id})>"
