"""
Product database model.

Products are appended to an open reception and removed from its tail only.
"""

import uuid

from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, Index
from pvz_service.app.db.session import Base
from pvz_service.app.models.enums import ProductType


class Product(Base):
    """Product accepted within a reception."""
    __tablename__ = "product"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    datetime = Column(DateTime(timezone=True), nullable=False)
    type = Column(
        Enum(ProductType, name="product_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True
    )
    reception_id = Column(String(36), ForeignKey("reception.id"), nullable=False, index=True)

    # Tail lookup: latest product of a reception
    __table_args__ = (
        Index("ix_product_reception_datetime", "reception_id", "datetime"),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, type='{self.type.value}', reception_id={self.reception_id})>"
