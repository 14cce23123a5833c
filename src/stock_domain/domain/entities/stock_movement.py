"""Stock movement (ledger entry) entity."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class MovementType(str, Enum):
    STOCK_IN = "STOCK_IN"
    STOCK_OUT = "STOCK_OUT"
    ADJUSTMENT = "ADJUSTMENT"


DEFAULT_REASONS: dict[MovementType, str] = {
    MovementType.STOCK_IN: "Stock entry",
    MovementType.STOCK_OUT: "Stock exit",
    MovementType.ADJUSTMENT: "Inventory adjustment",
}


@dataclass(frozen=True)  # Ledger entries are append-only
class StockMovement:
    """One quantity change of a product with before/after snapshots."""

    product_id: int  # Weak reference, the product may since have been deleted
    movement_type: MovementType
    quantity: int
    previous_quantity: int
    new_quantity: int
    username: str
    timestamp: datetime
    reason: str | None = None
    id: int | None = None
