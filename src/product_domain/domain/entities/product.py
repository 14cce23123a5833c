"""Product entity."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation

from src.common.exceptions.custom_exceptions import ValidationError

# Prices fit the DECIMAL(12, 2) column: two decimals, ten integer digits
PRICE_STEP = Decimal("0.01")
MAX_PRICE = Decimal("9999999999.99")


def _is_non_negative_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


@dataclass
class Product:
    """A stocked product. Quantity is mutated only through the stock ledger."""

    name: str
    price: Decimal = Decimal("0")
    quantity: int = 0
    minimum_stock: int = 0
    description: str | None = None
    category: str | None = None
    id: int | None = None  # Assigned by the repository on first save
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        """Normalizes the price and enforces the product invariants."""
        violations: list[str] = []

        if not isinstance(self.name, str) or not self.name.strip():
            violations.append("name")

        if not isinstance(self.price, Decimal):
            try:
                self.price = Decimal(str(self.price))
            except (InvalidOperation, ValueError, TypeError):
                violations.append("price")
        if "price" not in violations and (
            not self.price.is_finite()
            or not Decimal("0") <= self.price <= MAX_PRICE
            or self.price != self.price.quantize(PRICE_STEP)
        ):
            violations.append("price")

        if not _is_non_negative_int(self.quantity):
            violations.append("quantity")
        if not _is_non_negative_int(self.minimum_stock):
            violations.append("minimum_stock")

        if violations:
            raise ValidationError(f"Invalid product fields: {', '.join(violations)}", fields=violations)
