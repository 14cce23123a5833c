# tests/test_product_domain/test_application/test_product_service.py
"""Tests for the Product Application Service."""

from dataclasses import replace
from decimal import Decimal

import pytest

from src.common.dtos.product_dtos import ProductDTO, ProductSearchDTO, ProductSpecDTO
from src.common.exceptions.custom_exceptions import NotFoundError, ValidationError
from src.product_domain.domain.entities.product import Product

# Fixtures (mock_product_repository, product_service, sample_product, metrics) come from conftest.py


def test_create_product_saves_and_returns_dto(product_service, mock_product_repository, metrics) -> None:
    mock_product_repository.save_product.side_effect = lambda product: replace(product, id=1)

    spec = ProductSpecDTO(
        name="Laptop HP",
        description="High-end laptop",
        category="Electronics",
        price=Decimal("999.99"),
        quantity=50,
        minimum_stock=10,
    )
    result = product_service.create_product(spec)

    assert isinstance(result, ProductDTO)
    assert result.id == 1
    assert result.name == "Laptop HP"
    assert result.price == Decimal("999.99")
    assert result.quantity == 50
    assert result.low_stock is False
    assert result.out_of_stock is False
    assert result.total_value == Decimal("49999.50")
    assert result.status == "IN_STOCK"
    mock_product_repository.save_product.assert_called_once()
    assert metrics.products_created == 1


def test_create_product_rejects_negative_price(product_service, mock_product_repository, metrics) -> None:
    spec = ProductSpecDTO(name="Laptop HP", price=Decimal("-10"), quantity=10)

    with pytest.raises(ValidationError) as exc_info:
        product_service.create_product(spec)

    assert exc_info.value.fields == ["price"]
    mock_product_repository.save_product.assert_not_called()
    assert metrics.products_created == 0


def test_create_product_rejects_empty_name(product_service, mock_product_repository) -> None:
    with pytest.raises(ValidationError) as exc_info:
        product_service.create_product(ProductSpecDTO(name="", price=Decimal("1")))

    assert exc_info.value.fields == ["name"]
    mock_product_repository.save_product.assert_not_called()


def test_update_product_applies_only_given_fields(product_service, mock_product_repository, sample_product) -> None:
    mock_product_repository.get_product_by_id.return_value = sample_product
    mock_product_repository.update_product.side_effect = lambda product_id, changes: replace(
        sample_product, **changes
    )

    spec = ProductSpecDTO(name="Laptop HP Updated", price=Decimal("1099.99"), minimum_stock=3)
    result = product_service.update_product(1, spec)

    mock_product_repository.update_product.assert_called_once_with(
        1, {"name": "Laptop HP Updated", "price": Decimal("1099.99"), "minimum_stock": 3}
    )
    assert result.name == "Laptop HP Updated"
    assert result.quantity == 50
    assert result.description == "High-end laptop"


def test_update_product_quantity_overwrites_without_ledger(
    product_service, mock_product_repository, sample_product, caplog
) -> None:
    mock_product_repository.get_product_by_id.return_value = sample_product
    mock_product_repository.update_product.side_effect = lambda product_id, changes: replace(
        sample_product, **changes
    )

    result = product_service.update_product(1, ProductSpecDTO(quantity=15))

    mock_product_repository.update_product.assert_called_once_with(1, {"quantity": 15})
    assert result.quantity == 15
    assert "without a stock movement" in caplog.text


def test_update_product_rejects_negative_quantity(product_service, mock_product_repository, sample_product) -> None:
    mock_product_repository.get_product_by_id.return_value = sample_product

    with pytest.raises(ValidationError) as exc_info:
        product_service.update_product(1, ProductSpecDTO(quantity=-1))

    assert exc_info.value.fields == ["quantity"]
    mock_product_repository.update_product.assert_not_called()


def test_update_product_not_found(product_service, mock_product_repository) -> None:
    mock_product_repository.get_product_by_id.return_value = None

    with pytest.raises(NotFoundError):
        product_service.update_product(2, ProductSpecDTO(name="X"))

    mock_product_repository.update_product.assert_not_called()


def test_update_product_deleted_concurrently(product_service, mock_product_repository, sample_product) -> None:
    mock_product_repository.get_product_by_id.return_value = sample_product
    mock_product_repository.update_product.return_value = None

    with pytest.raises(NotFoundError):
        product_service.update_product(1, ProductSpecDTO(name="X"))


def test_delete_product(product_service, mock_product_repository, metrics) -> None:
    mock_product_repository.delete_product.return_value = True

    product_service.delete_product(1)

    mock_product_repository.delete_product.assert_called_once_with(1)
    assert metrics.products_deleted == 1


def test_delete_product_not_found(product_service, mock_product_repository, metrics) -> None:
    mock_product_repository.delete_product.return_value = False

    with pytest.raises(NotFoundError) as exc_info:
        product_service.delete_product(2)

    assert exc_info.value.entity_id == 2
    assert metrics.products_deleted == 0


def test_get_product_not_found_message(product_service, mock_product_repository) -> None:
    mock_product_repository.get_product_by_id.return_value = None

    with pytest.raises(NotFoundError) as exc_info:
        product_service.get_product(2)

    assert "Product not found with id: 2" in str(exc_info.value)


def test_list_products_computes_flags(product_service, mock_product_repository) -> None:
    mock_product_repository.get_all_products.return_value = [
        Product(id=1, name="Full", quantity=20, minimum_stock=5),
        Product(id=2, name="Low", quantity=3, minimum_stock=5),
        Product(id=3, name="Empty", quantity=0, minimum_stock=5),
    ]

    result = product_service.list_products()

    assert [p.status for p in result] == ["IN_STOCK", "LOW_STOCK", "OUT_OF_STOCK"]


@pytest.fixture
def catalogue() -> list[Product]:
    return [
        Product(id=1, name="Laptop Dell", category="Electronics", price=Decimal("800"), quantity=5, minimum_stock=5),
        Product(id=2, name="Laptop HP", category="Electronics", price=Decimal("1200"), quantity=2, minimum_stock=5),
        Product(
            id=3,
            name="Desk",
            description="Standing desk for laptop work",
            category="Furniture",
            price=Decimal("300"),
            quantity=0,
            minimum_stock=1,
        ),
        Product(id=4, name="Chair", category="Furniture", price=Decimal("150"), quantity=40, minimum_stock=5),
    ]


def test_search_with_multiple_filters(product_service, mock_product_repository, catalogue) -> None:
    mock_product_repository.get_all_products.return_value = catalogue

    search = ProductSearchDTO(
        category="Electronics", min_price=Decimal("1000"), max_price=Decimal("1500"), low_stock_only=True
    )
    result = product_service.search_products(search)

    assert [p.name for p in result] == ["Laptop HP"]
    assert result[0].low_stock is True


def test_search_term_matches_name_or_description(product_service, mock_product_repository, catalogue) -> None:
    mock_product_repository.get_all_products.return_value = catalogue

    result = product_service.search_products(ProductSearchDTO(search_term="LAPTOP"))

    assert [p.id for p in result] == [1, 2, 3]


def test_search_accepts_numeric_string_price_bounds(product_service, mock_product_repository, catalogue) -> None:
    mock_product_repository.get_all_products.return_value = catalogue

    result = product_service.search_products(ProductSearchDTO(min_price="150", max_price=" 300 "))

    assert [p.id for p in result] == [3, 4]


@pytest.mark.parametrize("bound", ["min_price", "max_price"])
@pytest.mark.parametrize("value", ["abc", "NaN", "Infinity"])
def test_search_rejects_invalid_price_bound(product_service, mock_product_repository, catalogue, bound, value) -> None:
    mock_product_repository.get_all_products.return_value = catalogue

    with pytest.raises(ValidationError) as exc_info:
        product_service.search_products(ProductSearchDTO(**{bound: value}))

    assert exc_info.value.fields == [bound]
    mock_product_repository.get_all_products.assert_not_called()


def test_search_without_criteria_returns_store_order(product_service, mock_product_repository, catalogue) -> None:
    mock_product_repository.get_all_products.return_value = catalogue

    result = product_service.search_products(ProductSearchDTO())

    assert [p.id for p in result] == [1, 2, 3, 4]


def test_find_helpers(product_service, mock_product_repository, catalogue) -> None:
    mock_product_repository.get_all_products.return_value = catalogue

    assert [p.id for p in product_service.find_products_by_category("furniture")] == [3, 4]
    assert [p.id for p in product_service.find_low_stock_products()] == [1, 2, 3]
    assert [p.id for p in product_service.find_out_of_stock_products()] == [3]


def test_get_all_categories_delegates(product_service, mock_product_repository) -> None:
    mock_product_repository.get_all_categories.return_value = ["Books", "Clothing", "Electronics"]

    assert product_service.get_all_categories() == ["Books", "Clothing", "Electronics"]
    mock_product_repository.get_all_categories.assert_called_once()


def test_get_basic_stats(product_service, mock_product_repository, catalogue) -> None:
    mock_product_repository.get_all_products.return_value = catalogue

    stats = product_service.get_basic_stats()

    assert stats["total_products"] == 4
    assert stats["low_stock_count"] == 3
    assert stats["out_of_stock_count"] == 1
    assert stats["total_value"] == Decimal("12400")
    assert stats["categories"] == 2


def test_get_inventory_summary(product_service, mock_product_repository, catalogue) -> None:
    mock_product_repository.get_all_products.return_value = catalogue

    summary = product_service.get_inventory_summary()

    mock_product_repository.get_all_products.assert_called_once()
    assert [p.id for p in summary["low_stock_products"]] == [1, 2, 3]
    assert [p.id for p in summary["out_of_stock_products"]] == [3]
    assert summary["total_products"] == 4
    assert summary["report_generated_at"] is not None


def test_import_products_continues_after_failure(product_service, mock_product_repository, metrics) -> None:
    mock_product_repository.save_product.side_effect = lambda product: replace(product, id=1)

    specs = [
        ProductSpecDTO(name="Good", price=Decimal("1"), quantity=1),
        ProductSpecDTO(name="Bad", price=Decimal("-1"), quantity=1),
        ProductSpecDTO(name="Also good", price=Decimal("2"), quantity=0),
    ]
    result = product_service.import_products(specs)

    assert result.total_processed == 3
    assert result.successful == 2
    assert result.errors == 1
    assert len(result.error_details) == 1
    assert result.error_details[0].startswith("Product Bad:")
    assert mock_product_repository.save_product.call_count == 2
    assert metrics.products_created == 2


def test_product_spec_from_dict_accepts_camel_case() -> None:
    spec = ProductSpecDTO.from_dict({"name": "Pen", "price": "1.20", "initialQuantity": 4, "minimumStock": 2})

    assert spec.quantity == 4
    assert spec.minimum_stock == 2
    assert spec.price == "1.20"


def test_product_spec_from_dict_converts_numeric_strings() -> None:
    spec = ProductSpecDTO.from_dict({"name": "Pen", "quantity": " 12 ", "minimumStock": "3"})

    assert spec.quantity == 12
    assert spec.minimum_stock == 3


def test_product_spec_from_dict_leaves_bad_quantity_for_validation(product_service, mock_product_repository) -> None:
    spec = ProductSpecDTO.from_dict({"name": "Pen", "price": "1.20", "quantity": "twelve"})

    with pytest.raises(ValidationError) as exc_info:
        product_service.create_product(spec)

    assert exc_info.value.fields == ["quantity"]
    mock_product_repository.save_product.assert_not_called()
