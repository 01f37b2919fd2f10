"""
Reception database model.

Ensures only one IN_PROGRESS reception per pickup point through a
DB-level partial unique index.
"""

import uuid

from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, Index, text
from pvz_service.app.db.session import Base
from pvz_service.app.models.enums import ReceptionStatus


OPEN_RECEPTION_INDEX = "ix_reception_one_open_per_pvz"


class Reception(Base):
    """
    Reception model.

    A goods-intake session at a pickup point. Opened as IN_PROGRESS,
    closed exactly once.
    """
    __tablename__ = "reception"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    datetime = Column(DateTime(timezone=True), nullable=False)
    pvz_id = Column(String(36), ForeignKey("pvz.id"), nullable=False, index=True)
    status = Column(
        Enum(ReceptionStatus, name="reception_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ReceptionStatus.IN_PROGRESS,
        index=True
    )

    # Unique constraint: only one open reception per pickup point
    __table_args__ = (
        Index(
            OPEN_RECEPTION_INDEX, "pvz_id", unique=True,
            postgresql_where=text("status = 'in_progress'"),
            sqlite_where=text("status = 'in_progress'"),
        ),
    )

    @property
    def is_open(self) -> bool:
        return self.status == ReceptionStatus.IN_PROGRESS

    def __repr__(self):
        return f"<Reception(id={self.id}, pvz_id={self.pvz_id}, status='{self.status.value}')>"
