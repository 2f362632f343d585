"""
Pydantic schemas for the product catalog.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    category: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=5000)
    price: Decimal = Field(gt=0, decimal_places=2)
    offer_price: Decimal | None = Field(default=None, gt=0, decimal_places=2)


class ProductUpdate(BaseModel):
    """Partial update: only fields that are set are applied."""
    name: str | None = Field(default=None, min_length=1, max_length=200)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=5000)
    price: Decimal | None = Field(default=None, gt=0, decimal_places=2)
    offer_price: Decimal | None = Field(default=None, gt=0, decimal_places=2)


class ProductResponse(BaseModel):
    id: int
    name: str
    category: str
    description: str
    price: Decimal
    offer_price: Decimal | None
    effective_price: Decimal
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    total: int
