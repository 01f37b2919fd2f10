"""
User database model.

This module defines the User SQLAlchemy model for authentication.
"""

import uuid

from sqlalchemy import Column, String, DateTime, Enum
from sqlalchemy.sql import func
from pvz_service.app.db.session import Base
from pvz_service.app.models.enums import UserRole


class User(Base):
    """
    User account.

    Created through registration; never updated or deleted by the API.
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
