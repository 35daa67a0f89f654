"""Tests for the optional catalog business rules."""
from decimal import Decimal

import pytest

from catalog.exceptions import ValidationError
from catalog.services.product_validator import ProductValidator


@pytest.fixture
def validator():
    return ProductValidator()


def test_valid_product_passes(validator):
    validator.validate("Smartphone Pro", Decimal("899.99"), "Electrónicos", 50)


@pytest.mark.parametrize("name", ["Test Phone", "PRUEBA", "demo kit", "Mesa temporal"])
def test_forbidden_words(validator, name):
    with pytest.raises(ValidationError) as exc_info:
        validator.validate(name, Decimal("100"), "Hogar", 1)

    assert "name" in exc_info.value.errors


def test_global_limits(validator):
    with pytest.raises(ValidationError) as exc_info:
        validator.validate("Yacht", Decimal("100000.01"), "Hogar", 10001)

    assert set(exc_info.value.errors) == {"price", "stock"}


@pytest.mark.parametrize(
    "category, price",
    [
        ("Electrónicos", "49.99"),
        ("Libros", "200.01"),
        ("Ropa", "9.99"),
        ("Vestimenta", "1000.01"),
    ],
)
def test_price_band_per_category(validator, category, price):
    with pytest.raises(ValidationError) as exc_info:
        validator.validate("Item", Decimal(price), category, 10)

    assert "price" in exc_info.value.errors


@pytest.mark.parametrize("category, stock", [("Software", 999), ("Comida", 101)])
def test_stock_level_per_category(validator, category, stock):
    with pytest.raises(ValidationError) as exc_info:
        validator.validate("Item", Decimal("60"), category, stock)

    assert "stock" in exc_info.value.errors
