"""Conversions between the Product entity and its wire schemas.

These functions never validate; schemas and the service layer do that.
"""
from typing import Iterable, List, Optional

from catalog.models.product import Product
from catalog.schemas.product import ProductCreate, ProductResponse, ProductUpdate


def to_response(product: Optional[Product]) -> Optional[ProductResponse]:
    if product is None:
        return None
    return ProductResponse.model_validate(product)


def to_response_list(products: Iterable[Product]) -> List[ProductResponse]:
    return [ProductResponse.model_validate(p) for p in products]


def to_entity(data: ProductCreate) -> Product:
    """Build a new, active Product from a create request."""
    return Product(
        name=data.name,
        description=data.description,
        price=data.price,
        category=data.category,
        stock=data.stock,
        active=True,
    )


def apply_update(product: Product, changes: ProductUpdate) -> Product:
    """Copy every field of ``changes`` that is not None onto ``product``."""
    if changes.name is not None:
        product.name = changes.name
    if changes.description is not None:
        product.description = changes.description
    if changes.price is not None:
        product.price = changes.price
    if changes.category is not None:
        product.category = changes.category
    if changes.stock is not None:
        product.stock = changes.stock
    return product
