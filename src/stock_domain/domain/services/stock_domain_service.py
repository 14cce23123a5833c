# src/stock_domain/domain/services/stock_domain_service.py
"""Domain rules for turning a stock request into a ledger entry."""

from datetime import datetime

from src.common.exceptions.custom_exceptions import InsufficientStockError, ValidationError
from src.product_domain.domain.entities.product import Product
from src.stock_domain.domain.entities.stock_movement import DEFAULT_REASONS, MovementType, StockMovement


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_positive_quantity(quantity, field: str = "quantity") -> None:
    """STOCK_IN and STOCK_OUT take a strictly positive integer delta."""
    if not _is_int(quantity) or quantity <= 0:
        raise ValidationError(f"{field} must be a positive integer, got {quantity!r}", fields=[field])


def validate_non_negative_quantity(quantity, field: str = "new_quantity") -> None:
    """ADJUSTMENT takes an absolute target, which may be zero but never negative."""
    if not _is_int(quantity) or quantity < 0:
        raise ValidationError(f"{field} must be a non-negative integer, got {quantity!r}", fields=[field])


def validate_username(username) -> None:
    if not isinstance(username, str) or not username.strip():
        raise ValidationError("username is required", fields=["username"])


def compute_new_quantity(product: Product, movement_type: MovementType, amount: int) -> int:
    """Returns the product quantity after the movement, enforcing the no-negative-stock rule."""
    current = product.quantity
    if movement_type is MovementType.STOCK_IN:
        return current + amount
    if movement_type is MovementType.STOCK_OUT:
        if amount > current:
            raise InsufficientStockError(product_id=product.id, available=current, requested=amount)
        return current - amount
    # ADJUSTMENT: amount is the target quantity
    return amount


def create_movement(
    product: Product,
    movement_type: MovementType,
    amount: int,
    reason: str | None,
    username: str,
    timestamp: datetime,
) -> StockMovement:
    """Builds the ledger entry for a movement against the product's current state."""
    previous_quantity = product.quantity
    new_quantity = compute_new_quantity(product, movement_type, amount)

    if movement_type is MovementType.ADJUSTMENT:
        magnitude = abs(new_quantity - previous_quantity)
    else:
        magnitude = amount

    if reason is None or not reason.strip():
        reason = DEFAULT_REASONS[movement_type]

    return StockMovement(
        product_id=product.id,
        movement_type=movement_type,
        quantity=magnitude,
        previous_quantity=previous_quantity,
        new_quantity=new_quantity,
        reason=reason,
        username=username,
        timestamp=timestamp,
    )
