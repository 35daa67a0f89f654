"""SQLAlchemy data-access layer for products.

Every query here is restricted to active products; soft-deleted rows stay
in the table but are invisible to the API.
"""
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog.exceptions import InvalidArgumentError
from catalog.models.product import Product, utcnow

# Sort keys accepted from clients, camelCase and snake_case alike
SORTABLE_COLUMNS = {
    "id": Product.id,
    "name": Product.name,
    "description": Product.description,
    "price": Product.price,
    "category": Product.category,
    "stock": Product.stock,
    "active": Product.active,
    "createdAt": Product.created_at,
    "created_at": Product.created_at,
    "updatedAt": Product.updated_at,
    "updated_at": Product.updated_at,
}


class ProductRepository:
    """Query and persistence operations against the products table."""

    def __init__(self, db: Session):
        self.db = db

    def _active(self):
        return self.db.query(Product).filter(Product.active.is_(True))

    def find_all_active(self) -> List[Product]:
        return self._active().order_by(Product.id).all()

    def find_all_active_paged(
        self,
        page: int,
        size: int,
        sort_field: str = "id",
        descending: bool = False,
    ) -> Tuple[List[Product], int]:
        """
        Get one page of active products.

        Args:
            page: Page number (0-indexed)
            size: Number of items per page
            sort_field: Key from SORTABLE_COLUMNS
            descending: Sort direction

        Returns:
            Tuple of (products on the page, total active products)

        Raises:
            InvalidArgumentError: If sort_field is not a sortable column
        """
        column = SORTABLE_COLUMNS.get(sort_field)
        if column is None:
            raise InvalidArgumentError(f"Cannot sort by unknown field: {sort_field}")

        query = self._active()
        total = query.count()

        ordering = column.desc() if descending else column.asc()
        products = (
            query.order_by(ordering, Product.id.asc())
            .offset(page * size)
            .limit(size)
            .all()
        )
        return products, total

    def find_by_id_active(self, product_id: int) -> Optional[Product]:
        return self._active().filter(Product.id == product_id).first()

    def find_by_category_active(self, category: str) -> List[Product]:
        return (
            self._active()
            .filter(func.lower(Product.category) == category.lower())
            .order_by(Product.id)
            .all()
        )

    def find_by_price_range_active(self, min_price: Decimal, max_price: Decimal) -> List[Product]:
        return (
            self._active()
            .filter(Product.price.between(min_price, max_price))
            .order_by(Product.id)
            .all()
        )

    def find_by_name_containing_active(self, name: str) -> List[Product]:
        return (
            self._active()
            .filter(Product.name.icontains(name, autoescape=True))
            .order_by(Product.id)
            .all()
        )

    def find_by_stock_below_active(self, threshold: int) -> List[Product]:
        return (
            self._active()
            .filter(Product.stock < threshold)
            .order_by(Product.id)
            .all()
        )

    def exists_by_name_excluding_id(self, name: str, exclude_id: int) -> bool:
        """Check whether another active product already uses ``name`` (ignoring case)."""
        query = self._active().filter(
            func.lower(Product.name) == name.lower(),
            Product.id != exclude_id,
        )
        return self.db.query(query.exists()).scalar()

    def count_by_category(self, category: str) -> int:
        return self._active().filter(func.lower(Product.category) == category.lower()).count()

    def save(self, product: Product) -> Product:
        """
        Insert or update a product.

        The first save stamps created_at; every save refreshes updated_at.
        """
        now = utcnow()
        if product.id is None:
            product.created_at = now
            if product.active is None:
                product.active = True
            self.db.add(product)
        product.updated_at = now

        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(product)
        return product
