from decimal import Decimal
from typing import Dict, Optional

from catalog.exceptions import ValidationError

FORBIDDEN_WORDS = ("test", "prueba", "demo", "temporal")
MAX_PRICE = Decimal("100000.00")
MAX_STOCK = 10000


class ProductValidator:
    """
    Catalog business rules that go beyond field-level schema validation.

    Rules:
    - Names may not contain placeholder words (test, demo, ...)
    - Price and stock have global upper limits
    - Some categories restrict the price band or expected stock level
    """

    def validate(
        self,
        name: Optional[str],
        price: Optional[Decimal],
        category: Optional[str],
        stock: Optional[int],
    ) -> None:
        """
        Check a candidate product against every rule.

        Raises:
            ValidationError: With one message per offending field
        """
        errors: Dict[str, str] = {}

        if self._contains_forbidden_word(name):
            errors["name"] = "Product name cannot contain placeholder words such as 'test' or 'demo'"

        if price is not None and price > MAX_PRICE:
            errors["price"] = f"Price cannot exceed ${MAX_PRICE}"

        if stock is not None and stock > MAX_STOCK:
            errors["stock"] = f"Stock cannot exceed {MAX_STOCK} units"

        self._check_price_for_category(price, category, errors)
        self._check_stock_for_category(stock, category, errors)

        if errors:
            raise ValidationError("Product violates catalog business rules", errors)

    @staticmethod
    def _contains_forbidden_word(name: Optional[str]) -> bool:
        if not name:
            return False
        lowered = name.lower()
        return any(word in lowered for word in FORBIDDEN_WORDS)

    @staticmethod
    def _check_price_for_category(
        price: Optional[Decimal], category: Optional[str], errors: Dict[str, str]
    ) -> None:
        if price is None or category is None:
            return

        lowered = category.lower()

        if "electrón" in lowered and price < Decimal("50.00"):
            errors["price"] = "Electronics must cost at least $50.00"

        if "libro" in lowered and price > Decimal("200.00"):
            errors["price"] = "Books cannot cost more than $200.00"

        if "ropa" in lowered or "vestimenta" in lowered:
            if price < Decimal("10.00") or price > Decimal("1000.00"):
                errors["price"] = "Clothing must cost between $10.00 and $1,000.00"

    @staticmethod
    def _check_stock_for_category(
        stock: Optional[int], category: Optional[str], errors: Dict[str, str]
    ) -> None:
        if stock is None or category is None:
            return

        lowered = category.lower()

        if ("digital" in lowered or "software" in lowered) and stock < 1000:
            errors["stock"] = "Digital products should keep a high stock (at least 1000)"

        if ("comida" in lowered or "alimento" in lowered) and stock > 100:
            errors["stock"] = "Perishable products cannot hold more than 100 units"
