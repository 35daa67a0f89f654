from sqlalchemy.orm import Session
from decimal import Decimal
from typing import Optional, List, Tuple
import logging

from catalog.config import get_settings
from catalog.exceptions import (
    InvalidArgumentError,
    ProductAlreadyExistsError,
    ProductNotFoundError,
)
from catalog.models.product import Product
from catalog.repositories.product_repository import ProductRepository
from catalog.schemas.product import ProductUpdate
from catalog.services.product_validator import ProductValidator
from catalog.utils.product_mapper import apply_update

logger = logging.getLogger(__name__)

# Exclusion id used when checking name uniqueness for a product that has no id yet.
# A stored product with id 0 would be ignored by that check.
NO_EXCLUDED_ID = 0


class ProductService:
    """
    Service class for the product catalog business rules.

    This service handles:
    - Listing active products (flat, paged, or filtered)
    - Creating products with case-insensitive unique names
    - Full and partial updates
    - Stock-only updates
    - Soft deletes (products are marked inactive, never removed)
    """

    def __init__(self, db: Session, strict_rules: Optional[bool] = None):
        self.db = db
        self.repository = ProductRepository(db)
        if strict_rules is None:
            strict_rules = get_settings().STRICT_PRODUCT_RULES
        self.validator = ProductValidator() if strict_rules else None

    def get_all(self) -> List[Product]:
        """Get every active product."""
        logger.debug("Fetching all active products")
        return self.repository.find_all_active()

    def get_all_paged(
        self,
        page: int = 0,
        size: int = 20,
        sort: str = "id",
        direction: str = "asc",
    ) -> Tuple[List[Product], int]:
        """
        Get a page of active products.

        Args:
            page: Page number (0-indexed)
            size: Number of items per page
            sort: Field to sort by
            direction: "desc" (any case) sorts descending, anything else ascending

        Returns:
            Tuple of (products list, total count)
        """
        descending = direction.lower() == "desc"
        logger.debug(f"Fetching active products page={page} size={size} sort={sort} desc={descending}")
        return self.repository.find_all_active_paged(page, size, sort, descending)

    def get_by_id(self, product_id: int) -> Optional[Product]:
        """
        Get an active product by ID.

        Returns:
            Product instance or None if not found or inactive
        """
        logger.debug(f"Looking up product #{product_id}")
        return self.repository.find_by_id_active(product_id)

    def get_by_id_or_raise(self, product_id: int) -> Product:
        product = self.repository.find_by_id_active(product_id)
        if not product:
            raise ProductNotFoundError(product_id)
        return product

    def create(self, product: Product) -> Product:
        """
        Create a new product.

        Args:
            product: Unsaved product built from the create request

        Returns:
            The persisted product with its id and timestamps

        Raises:
            ProductAlreadyExistsError: If an active product has the same name (any case)
            ValidationError: If strict catalog rules are enabled and violated
        """
        logger.debug(f"Creating product '{product.name}'")

        self._validate(product.name, product.price, product.category, product.stock)

        if self.repository.exists_by_name_excluding_id(product.name, NO_EXCLUDED_ID):
            raise ProductAlreadyExistsError(product.name)

        if product.active is None:
            product.active = True

        saved = self.repository.save(product)
        logger.info(f"Product #{saved.id} created")
        return saved

    def update(self, product_id: int, candidate: Product) -> Product:
        """
        Replace every writable field of an active product.

        Raises:
            ProductNotFoundError: If no active product has this ID
            ProductAlreadyExistsError: If the new name belongs to another active product
        """
        logger.debug(f"Updating product #{product_id}")

        existing = self.get_by_id_or_raise(product_id)
        self._validate(candidate.name, candidate.price, candidate.category, candidate.stock)
        self._check_name_available(existing, candidate.name)

        existing.name = candidate.name
        existing.description = candidate.description
        existing.price = candidate.price
        existing.category = candidate.category
        existing.stock = candidate.stock

        updated = self.repository.save(existing)
        logger.info(f"Product #{product_id} updated")
        return updated

    def partial_update(self, product_id: int, changes: ProductUpdate) -> Product:
        """
        Apply only the provided fields to an active product.

        Raises:
            ProductNotFoundError: If no active product has this ID
            ProductAlreadyExistsError: If the new name belongs to another active product
        """
        logger.debug(f"Partially updating product #{product_id}")

        existing = self.get_by_id_or_raise(product_id)
        if changes.name is not None:
            self._check_name_available(existing, changes.name)

        self._validate(
            changes.name if changes.name is not None else existing.name,
            changes.price if changes.price is not None else existing.price,
            changes.category if changes.category is not None else existing.category,
            changes.stock if changes.stock is not None else existing.stock,
        )

        apply_update(existing, changes)
        updated = self.repository.save(existing)
        logger.info(f"Product #{product_id} partially updated")
        return updated

    def delete(self, product_id: int) -> None:
        """
        Soft-delete a product by marking it inactive.

        Raises:
            ProductNotFoundError: If no active product has this ID
        """
        logger.debug(f"Deleting product #{product_id}")

        product = self.get_by_id_or_raise(product_id)
        product.active = False
        self.repository.save(product)

        logger.info(f"Product #{product_id} marked inactive")

    def get_by_category(self, category: str) -> List[Product]:
        logger.debug(f"Fetching products in category '{category}'")
        return self.repository.find_by_category_active(category)

    def get_by_price_range(self, min_price: Decimal, max_price: Decimal) -> List[Product]:
        """
        Get active products priced within [min_price, max_price].

        Raises:
            InvalidArgumentError: If min_price is greater than max_price
        """
        logger.debug(f"Fetching products priced between {min_price} and {max_price}")
        if min_price > max_price:
            raise InvalidArgumentError("Minimum price cannot be greater than maximum price")
        return self.repository.find_by_price_range_active(min_price, max_price)

    def search_by_name(self, name: str) -> List[Product]:
        logger.debug(f"Searching products by name '{name}'")
        return self.repository.find_by_name_containing_active(name)

    def get_low_stock(self, threshold: int) -> List[Product]:
        """Get active products whose stock is strictly below ``threshold``."""
        logger.debug(f"Fetching products with stock below {threshold}")
        return self.repository.find_by_stock_below_active(threshold)

    def update_stock(self, product_id: int, new_stock: int) -> Product:
        """
        Overwrite the stock of an active product.

        Raises:
            ProductNotFoundError: If no active product has this ID
            InvalidArgumentError: If new_stock is negative
        """
        logger.debug(f"Updating stock of product #{product_id} to {new_stock}")

        product = self.get_by_id_or_raise(product_id)
        if new_stock < 0:
            raise InvalidArgumentError("Stock cannot be negative")

        product.stock = new_stock
        updated = self.repository.save(product)

        logger.info(f"Stock of product #{product_id} set to {new_stock}")
        return updated

    def exists(self, product_id: int) -> bool:
        return self.repository.find_by_id_active(product_id) is not None

    def count_by_category(self, category: str) -> int:
        return self.repository.count_by_category(category)

    def _check_name_available(self, existing: Product, new_name: str) -> None:
        if existing.name.lower() == new_name.lower():
            return
        if self.repository.exists_by_name_excluding_id(new_name, existing.id):
            raise ProductAlreadyExistsError(new_name)

    def _validate(self, name, price, category, stock) -> None:
        if self.validator is not None:
            self.validator.validate(name, price, category, stock)
