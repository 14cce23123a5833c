# src/product_domain/application/product_service.py
"""Application service for the product catalogue and its derived stock status."""

import logging
from dataclasses import replace
from decimal import Decimal, InvalidOperation

from src.common.dtos.product_dtos import (
    BatchOperationResultDTO,
    ProductDTO,
    ProductSearchDTO,
    ProductSpecDTO,
)
from src.common.exceptions.custom_exceptions import ApplicationError, NotFoundError, ValidationError
from src.common.metrics import InventoryMetrics
from src.common.utils.date_utils import utc_now
from src.product_domain.domain.entities.product import Product
from src.product_domain.domain.repositories.product_repository import IProductRepository
from src.product_domain.domain.services.stock_classification import classify

logger = logging.getLogger(__name__)

DESCRIPTIVE_FIELDS = ("name", "description", "category", "price", "minimum_stock")


def to_product_dto(product: Product) -> ProductDTO:
    """Assembles the read model of a product, computing its stock flags now."""
    classification = classify(product)
    return ProductDTO(
        id=product.id,
        name=product.name,
        description=product.description,
        category=product.category,
        price=product.price,
        quantity=product.quantity,
        minimum_stock=product.minimum_stock,
        low_stock=classification.low_stock,
        out_of_stock=classification.out_of_stock,
        total_value=classification.total_value,
        status=classification.status.value,
    )


def parse_price_bound(value, field: str) -> Decimal | None:
    """Converts a price filter bound to Decimal. Unparseable or non-finite bounds are a ValidationError."""
    if value is None:
        return None
    try:
        bound = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{field} must be a number, got {value!r}", fields=[field])
    if not bound.is_finite():
        raise ValidationError(f"{field} must be a finite number, got {value!r}", fields=[field])
    return bound


def matches_filter(product: Product, search: ProductSearchDTO) -> bool:
    """True if the product satisfies every criterion set on the filter."""
    if search.search_term:
        term = search.search_term.strip().lower()
        haystacks = (product.name or "", product.description or "")
        if term and not any(term in text.lower() for text in haystacks):
            return False

    if search.category and (product.category or "").lower() != search.category.strip().lower():
        return False

    if search.min_price is not None and product.price < search.min_price:
        return False
    if search.max_price is not None and product.price > search.max_price:
        return False

    classification = classify(product)
    if search.low_stock_only and not classification.low_stock:
        return False
    if search.out_of_stock_only and not classification.out_of_stock:
        return False

    return True


class ProductApplicationService:
    """Creates, updates, deletes and queries products."""

    def __init__(self, product_repo: IProductRepository, metrics: InventoryMetrics | None = None) -> None:
        self.product_repo = product_repo
        self.metrics = metrics or InventoryMetrics()

    def create_product(self, spec: ProductSpecDTO) -> ProductDTO:
        """Validates and stores a new product. Raises ValidationError listing every violated field."""
        product = Product(
            name=spec.name,
            description=spec.description,
            category=spec.category,
            price=spec.price if spec.price is not None else Decimal("0"),
            quantity=spec.quantity if spec.quantity is not None else 0,
            minimum_stock=spec.minimum_stock if spec.minimum_stock is not None else 0,
        )
        saved = self.product_repo.save_product(product)
        self.metrics.increment_products_created()
        logger.info(f"Created product {saved.id} ({saved.name}) with quantity {saved.quantity}")
        return to_product_dto(saved)

    def update_product(self, product_id: int, spec: ProductSpecDTO) -> ProductDTO:
        """
        Updates the descriptive fields that are set on ``spec``.

        A quantity on the spec overwrites the stored quantity directly. That path
        records no ledger entry; stock changes meant to be audited go through the
        stock service.
        """
        current = self._get_entity(product_id)

        changes = {name: getattr(spec, name) for name in DESCRIPTIVE_FIELDS if getattr(spec, name) is not None}
        if spec.quantity is not None:
            changes["quantity"] = spec.quantity

        # Validate the merged record before touching storage
        validated = replace(current, **changes)
        changes = {name: getattr(validated, name) for name in changes}

        if "quantity" in changes and changes["quantity"] != current.quantity:
            logger.warning(
                f"Product {product_id} quantity overwritten from {current.quantity} to {changes['quantity']} "
                f"without a stock movement"
            )

        updated = self.product_repo.update_product(product_id, changes)
        if updated is None:
            raise NotFoundError(f"Product not found with id: {product_id}", entity_id=product_id)
        logger.info(f"Updated product {product_id}: {', '.join(sorted(changes)) or 'no changes'}")
        return to_product_dto(updated)

    def delete_product(self, product_id: int) -> None:
        """Deletes a product. Its stock history is kept and keeps referencing the id."""
        if not self.product_repo.delete_product(product_id):
            raise NotFoundError(f"Product not found with id: {product_id}", entity_id=product_id)
        self.metrics.increment_products_deleted()
        logger.info(f"Deleted product {product_id}")

    def get_product(self, product_id: int) -> ProductDTO:
        return to_product_dto(self._get_entity(product_id))

    def list_products(self) -> list[ProductDTO]:
        return [to_product_dto(product) for product in self.product_repo.get_all_products()]

    def search_products(self, search: ProductSearchDTO) -> list[ProductDTO]:
        """Filters products in store order. All criteria are AND-combined."""
        search = replace(
            search,
            min_price=parse_price_bound(search.min_price, "min_price"),
            max_price=parse_price_bound(search.max_price, "max_price"),
        )
        return [
            to_product_dto(product)
            for product in self.product_repo.get_all_products()
            if matches_filter(product, search)
        ]

    def find_products_by_category(self, category: str) -> list[ProductDTO]:
        return self.search_products(ProductSearchDTO(category=category))

    def find_low_stock_products(self) -> list[ProductDTO]:
        return self.search_products(ProductSearchDTO(low_stock_only=True))

    def find_out_of_stock_products(self) -> list[ProductDTO]:
        return self.search_products(ProductSearchDTO(out_of_stock_only=True))

    def get_all_categories(self) -> list[str]:
        return self.product_repo.get_all_categories()

    def get_basic_stats(self) -> dict:
        """Returns counts and total value computed from one listing of the store."""
        products = [to_product_dto(product) for product in self.product_repo.get_all_products()]
        return self._stats(products)

    def get_inventory_summary(self) -> dict:
        """Basic statistics plus the low-stock and out-of-stock product lists."""
        products = [to_product_dto(product) for product in self.product_repo.get_all_products()]
        summary = self._stats(products)
        summary["low_stock_products"] = [p for p in products if p.low_stock]
        summary["out_of_stock_products"] = [p for p in products if p.out_of_stock]
        summary["report_generated_at"] = utc_now()
        return summary

    @staticmethod
    def _stats(products: list[ProductDTO]) -> dict:
        categories = {p.category for p in products if p.category and p.category.strip()}

        return {
            "total_products": len(products),
            "low_stock_count": sum(1 for p in products if p.low_stock),
            "out_of_stock_count": sum(1 for p in products if p.out_of_stock),
            "total_value": sum((p.total_value for p in products), Decimal("0")),
            "categories": len(categories),
        }

    def import_products(self, specs: list[ProductSpecDTO]) -> BatchOperationResultDTO:
        """Creates each product independently. A failing item is recorded and the batch continues."""
        result = BatchOperationResultDTO(total_processed=len(specs))

        for spec in specs:
            try:
                self.create_product(spec)
                result.successful += 1
            except ApplicationError as e:
                result.errors += 1
                result.error_details.append(f"Product {spec.name}: {e}")
                logger.error(f"Failed to import product {spec.name}: {e}")

        logger.info(
            f"Product import completed: {result.successful} created, {result.errors} failed "
            f"of {result.total_processed}"
        )
        return result

    def _get_entity(self, product_id: int) -> Product:
        product = self.product_repo.get_product_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product not found with id: {product_id}", entity_id=product_id)
        return product
