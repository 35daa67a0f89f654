from pydantic import Field, field_serializer, field_validator
from datetime import datetime
from decimal import Decimal
from typing import Optional

from catalog.schemas.common import CamelModel, MAX_INT64, TIMESTAMP_FORMAT

# Letters (accented Latin included) and spaces
CATEGORY_PATTERN = r"^[A-Za-zÁ-ÿñÑ\s]+$"


def _not_blank(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError("Product name must not be blank")
    return value


class ProductBase(CamelModel):
    """Base schema for Product with the client-writable attributes."""
    name: str = Field(..., min_length=2, max_length=100, description="Product name")
    description: Optional[str] = Field(None, max_length=500, description="Product description")
    price: Decimal = Field(
        ..., gt=0, max_digits=10, decimal_places=2, description="Product price (must be positive)"
    )
    category: str = Field(
        ..., min_length=1, pattern=CATEGORY_PATTERN, description="Category (letters and spaces only)"
    )
    stock: int = Field(..., ge=0, le=MAX_INT64, description="Available stock (must be non-negative)")


class ProductCreate(ProductBase):
    """Schema for creating a product; also the full-replacement body of PUT."""

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _not_blank(value)


class ProductUpdate(CamelModel):
    """Schema for partially updating a product. Fields left as None are not changed."""
    name: Optional[str] = Field(None, min_length=2, max_length=100, description="Product name")
    description: Optional[str] = Field(None, max_length=500, description="Product description")
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2, description="Product price")
    category: Optional[str] = Field(None, min_length=1, pattern=CATEGORY_PATTERN, description="Category")
    stock: Optional[int] = Field(None, ge=0, le=MAX_INT64, description="Available stock")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _not_blank(value)

    def has_updates(self) -> bool:
        return any(
            value is not None
            for value in (self.name, self.description, self.price, self.category, self.stock)
        )


class ProductResponse(CamelModel):
    """
    Schema for product response including all fields.

    Mirrors stored rows as they are; request constraints are not re-checked here.
    """
    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    category: str
    stock: int
    active: bool
    created_at: datetime
    updated_at: datetime

    @field_serializer("price", when_used="json")
    def serialize_price(self, value: Decimal) -> float:
        return float(value)

    @field_serializer("created_at", "updated_at", when_used="json")
    def serialize_timestamp(self, value: datetime) -> str:
        return value.strftime(TIMESTAMP_FORMAT)
