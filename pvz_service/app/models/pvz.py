"""
Pickup point (PVZ) database model.

Pickup points are registered by moderators and never updated afterwards.
"""

import uuid

from sqlalchemy import Column, String, DateTime, Enum
from pvz_service.app.db.session import Base
from pvz_service.app.models.enums import City


class PVZ(Base):
    """
    Pickup point model.

    Owns its receptions; there is no update or delete operation.
    """
    __tablename__ = "pvz"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    city = Column(
        Enum(City, name="pvz_city", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True
    )
    registration_date = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self):
        return f"<PVZ(id={self.id}, city='{self.city.value}')>"
