"""Data Transfer Objects for stock movement requests."""

from dataclasses import dataclass
from typing import Any, Optional

from src.common.utils.payload_utils import as_int


@dataclass
class StockAdjustmentRequestDTO:
    """One item of a bulk adjustment: set ``product_id`` to ``quantity``."""

    product_id: int
    quantity: int
    reason: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StockAdjustmentRequestDTO":
        return cls(
            product_id=as_int(data.get("product_id", data.get("productId"))),
            quantity=as_int(data.get("quantity")),
            reason=data.get("reason"),
        )
