"""
Enumerations shared by models and schemas.

Defines roles, supported cities, reception statuses and product types.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        EMPLOYEE: Works at a pickup point, runs receptions and adds products
        MODERATOR: Registers new pickup points
    """
    EMPLOYEE = "employee"
    MODERATOR = "moderator"


class City(str, enum.Enum):
    """Cities where pickup points may be opened."""
    MOSCOW = "Москва"
    SAINT_PETERSBURG = "Санкт-Петербург"
    KAZAN = "Казань"


class ReceptionStatus(str, enum.Enum):
    """
    Reception lifecycle.

    IN_PROGRESS -> CLOSE is the only transition; CLOSE is terminal.
    """
    IN_PROGRESS = "in_progress"
    CLOSE = "close"


class ProductType(str, enum.Enum):
    """Product categories accepted by a reception."""
    ELECTRONICS = "electronics"
    CLOTHES = "clothes"
    SHOES = "shoes"
