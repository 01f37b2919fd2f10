"""
Pickup point, reception and product Pydantic schemas.

Field names on the wire follow the public API (camelCase); Python-side
names stay snake_case.
"""

from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel, Field

from pvz_service.app.models.enums import City, ProductType, ReceptionStatus


class PVZCreate(BaseModel):
    """Schema for registering a pickup point."""
    city: City = Field(..., description="One of the supported cities")


class ReceptionCreate(BaseModel):
    """Schema for opening a reception."""
    pvz_id: UUID = Field(..., alias="pvzId", description="Pickup point id")

    class Config:
        populate_by_name = True


class ProductCreate(BaseModel):
    """Schema for adding a product to the open reception of a pickup point."""
    type: ProductType = Field(..., description="Product category")
    pvz_id: UUID = Field(..., alias="pvzId", description="Pickup point id")

    class Config:
        populate_by_name = True


class PVZResponse(BaseModel):
    """Schema for pickup point response."""
    id: str
    registration_date: datetime = Field(..., alias="registrationDate")
    city: City

    class Config:
        populate_by_name = True

    @classmethod
    def from_model(cls, pvz) -> "PVZResponse":
        return cls(id=pvz.id, registration_date=pvz.registration_date, city=pvz.city)


class ReceptionResponse(BaseModel):
    """Schema for reception response."""
    id: str
    date_time: datetime = Field(..., alias="dateTime")
    pvz_id: str = Field(..., alias="pvzId")
    status: ReceptionStatus

    class Config:
        populate_by_name = True

    @classmethod
    def from_model(cls, reception) -> "ReceptionResponse":
        return cls(
            id=reception.id,
            date_time=reception.datetime,
            pvz_id=reception.pvz_id,
            status=reception.status
        )


class ProductResponse(BaseModel):
    """Schema for product response."""
    id: str
    date_time: datetime = Field(..., alias="dateTime")
    type: ProductType
    reception_id: str = Field(..., alias="receptionId")

    class Config:
        populate_by_name = True

    @classmethod
    def from_model(cls, product) -> "ProductResponse":
        return cls(
            id=product.id,
            date_time=product.datetime,
            type=product.type,
            reception_id=product.reception_id
        )


class ReceptionWithProducts(BaseModel):
    reception: ReceptionResponse
    products: List[ProductResponse]


class PVZWithReceptions(BaseModel):
    """One entry of GET /pvz."""
    pvz: PVZResponse
    receptions: List[ReceptionWithProducts]

    @classmethod
    def from_tree(cls, tree) -> "PVZWithReceptions":
        return cls(
            pvz=PVZResponse.from_model(tree.pvz),
            receptions=[
                ReceptionWithProducts(
                    reception=ReceptionResponse.from_model(node.reception),
                    products=[ProductResponse.from_model(p) for p in node.products]
                )
                for node in tree.receptions
            ]
        )
