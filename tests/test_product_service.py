"""Tests for the product business-rule layer against a real session."""
from decimal import Decimal

import pytest

from catalog.exceptions import (
    InvalidArgumentError,
    ProductAlreadyExistsError,
    ProductNotFoundError,
    ValidationError,
)
from catalog.models.product import Product
from catalog.schemas.product import ProductUpdate
from catalog.services.product_service import ProductService


def make_product(name="Laptop Gaming", price="2999.99", category="Electrónicos", stock=10, description=None):
    return Product(
        name=name,
        description=description,
        price=Decimal(price),
        category=category,
        stock=stock,
    )


def test_create_assigns_id_and_timestamps(service):
    product = service.create(make_product())

    assert product.id is not None
    assert product.active is True
    assert product.created_at is not None
    assert product.created_at <= product.updated_at


def test_create_duplicate_name_any_case(service):
    service.create(make_product(name="Laptop Gaming"))

    with pytest.raises(ProductAlreadyExistsError):
        service.create(make_product(name="laptop GAMING"))


def test_create_reuses_name_of_deleted_product(service):
    first = service.create(make_product(name="Laptop Gaming"))
    service.delete(first.id)

    second = service.create(make_product(name="Laptop Gaming"))

    assert second.id != first.id


def test_get_by_id(service):
    created = service.create(make_product())

    assert service.get_by_id(created.id).name == "Laptop Gaming"
    assert service.get_by_id(9999) is None


def test_get_all_returns_only_active(service):
    keep = service.create(make_product(name="Keep"))
    drop = service.create(make_product(name="Drop"))
    service.delete(drop.id)

    assert [p.id for p in service.get_all()] == [keep.id]


def test_get_all_paged(service):
    for i in range(5):
        service.create(make_product(name=f"Item {i}", price=str(10 + i)))

    products, total = service.get_all_paged(page=1, size=2, sort="price", direction="DESC")

    assert total == 5
    assert [p.name for p in products] == ["Item 2", "Item 1"]


def test_get_all_paged_unknown_sort_field(service):
    with pytest.raises(InvalidArgumentError):
        service.get_all_paged(sort="colour")


def test_update_overwrites_fields(service):
    created = service.create(make_product())
    created_at = created.created_at
    previous_update = created.updated_at

    updated = service.update(
        created.id,
        make_product(name="Laptop Gaming Pro", price="3499.99", category="Computo", stock=20, description="New"),
    )

    assert updated.name == "Laptop Gaming Pro"
    assert updated.price == Decimal("3499.99")
    assert updated.category == "Computo"
    assert updated.stock == 20
    assert updated.description == "New"
    assert updated.created_at == created_at
    assert updated.updated_at > previous_update


def test_update_keeps_own_name_in_other_case(service):
    created = service.create(make_product(name="Laptop Gaming"))

    updated = service.update(created.id, make_product(name="LAPTOP GAMING"))

    assert updated.name == "LAPTOP GAMING"


def test_update_name_collision(service):
    service.create(make_product(name="First"))
    second = service.create(make_product(name="Second"))

    with pytest.raises(ProductAlreadyExistsError):
        service.update(second.id, make_product(name="FIRST"))


def test_update_not_found(service):
    with pytest.raises(ProductNotFoundError):
        service.update(99, make_product())


def test_partial_update_applies_only_given_fields(service):
    created = service.create(make_product(description="Original"))

    updated = service.partial_update(created.id, ProductUpdate(stock=3))

    assert updated.stock == 3
    assert updated.description == "Original"
    assert updated.name == "Laptop Gaming"


def test_partial_update_name_collision(service):
    service.create(make_product(name="First"))
    second = service.create(make_product(name="Second"))

    with pytest.raises(ProductAlreadyExistsError):
        service.partial_update(second.id, ProductUpdate(name="first"))


def test_delete_is_soft(service, db_session):
    created = service.create(make_product())

    service.delete(created.id)

    stored = db_session.get(Product, created.id)
    assert stored is not None
    assert stored.active is False
    assert service.get_by_id(created.id) is None
    assert service.exists(created.id) is False
    assert service.search_by_name("Laptop") == []
    assert service.get_by_category("Electrónicos") == []


def test_delete_not_found(service):
    with pytest.raises(ProductNotFoundError):
        service.delete(99)


def test_delete_twice(service):
    created = service.create(make_product())
    service.delete(created.id)

    with pytest.raises(ProductNotFoundError):
        service.delete(created.id)


def test_get_by_category_ignores_case(service):
    service.create(make_product(name="Laptop", category="Electrónicos"))
    service.create(make_product(name="Novel", category="Libros", price="20"))

    products = service.get_by_category("electrónicos")

    assert [p.name for p in products] == ["Laptop"]
    assert service.count_by_category("electrónicos") == 1


def test_accented_text_ignores_case(service):
    service.create(make_product(name="MANTEQUILLA ÑOÑA", category="ALIMENTOS BÁSICOS"))

    with pytest.raises(ProductAlreadyExistsError):
        service.create(make_product(name="mantequilla ñoña"))

    assert len(service.get_by_category("alimentos básicos")) == 1
    assert service.count_by_category("Alimentos Básicos") == 1
    assert len(service.search_by_name("ñoña")) == 1


def test_get_by_price_range_is_inclusive(service):
    service.create(make_product(name="Ten", price="10.00"))
    service.create(make_product(name="Fifty", price="50.00"))
    service.create(make_product(name="Hundred", price="100.00"))

    products = service.get_by_price_range(Decimal("10.00"), Decimal("50.00"))

    assert sorted(p.name for p in products) == ["Fifty", "Ten"]


def test_get_by_price_range_inverted(service):
    with pytest.raises(InvalidArgumentError):
        service.get_by_price_range(Decimal("100"), Decimal("10"))


def test_search_by_name_substring(service):
    service.create(make_product(name="Apple iPhone"))
    service.create(make_product(name="Samsung Galaxy"))
    service.create(make_product(name="Apple MacBook"))

    assert len(service.search_by_name("APPLE")) == 2
    assert service.search_by_name("100%") == []


def test_get_low_stock_is_strict(service):
    service.create(make_product(name="Five", stock=5))
    service.create(make_product(name="Two", stock=2))

    assert [p.name for p in service.get_low_stock(5)] == ["Two"]


def test_update_stock(service):
    created = service.create(make_product(stock=10))

    updated = service.update_stock(created.id, 25)

    assert updated.stock == 25


def test_update_stock_negative_leaves_record_untouched(service, db_session):
    created = service.create(make_product(stock=10))
    previous_update = created.updated_at

    with pytest.raises(InvalidArgumentError):
        service.update_stock(created.id, -1)

    db_session.expire_all()
    stored = db_session.get(Product, created.id)
    assert stored.stock == 10
    assert stored.updated_at == previous_update


def test_update_stock_not_found_checked_first(service):
    with pytest.raises(ProductNotFoundError):
        service.update_stock(99, -1)


def test_strict_rules_reject_placeholder_names(db_session):
    strict = ProductService(db_session, strict_rules=True)

    with pytest.raises(ValidationError) as exc_info:
        strict.create(make_product(name="Demo Laptop"))

    assert "name" in exc_info.value.errors
    assert strict.get_all() == []
