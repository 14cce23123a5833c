"""Derived stock status of a product.

Low stock, out of stock and total value are never stored. They are recomputed
from quantity, minimum stock and price every time a product is read, so they
cannot drift from the values they describe.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from src.product_domain.domain.entities.product import Product


class StockStatus(str, Enum):
    IN_STOCK = "IN_STOCK"
    LOW_STOCK = "LOW_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"


@dataclass(frozen=True)
class StockClassification:
    low_stock: bool
    out_of_stock: bool
    total_value: Decimal

    @property
    def status(self) -> StockStatus:
        if self.out_of_stock:
            return StockStatus.OUT_OF_STOCK
        if self.low_stock:
            return StockStatus.LOW_STOCK
        return StockStatus.IN_STOCK


def is_low_stock(quantity: int, minimum_stock: int) -> bool:
    return quantity <= minimum_stock


def is_out_of_stock(quantity: int) -> bool:
    return quantity == 0


def classify(product: Product) -> StockClassification:
    """Classifies a product from its current quantity, threshold and price."""
    return StockClassification(
        low_stock=is_low_stock(product.quantity, product.minimum_stock),
        out_of_stock=is_out_of_stock(product.quantity),
        total_value=product.price * product.quantity,
    )
