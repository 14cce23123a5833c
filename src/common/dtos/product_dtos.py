"""Data Transfer Objects for Product data."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

from src.common.utils.payload_utils import as_int


@dataclass
class ProductSpecDTO:
    """Caller-supplied product fields for create and update. None means "not provided"."""

    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[Decimal] = None
    quantity: Optional[int] = None
    minimum_stock: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProductSpecDTO":
        """Creates a spec from a payload, accepting snake_case or camelCase keys."""
        return cls(
            name=data.get("name"),
            description=data.get("description"),
            category=data.get("category"),
            price=data.get("price"),
            quantity=as_int(data.get("quantity", data.get("initialQuantity"))),
            minimum_stock=as_int(data.get("minimum_stock", data.get("minimumStock"))),
        )


@dataclass
class ProductDTO:
    """A product as returned to callers, with stock flags computed at read time."""

    id: int
    name: str
    description: Optional[str]
    category: Optional[str]
    price: Decimal
    quantity: int
    minimum_stock: int
    low_stock: bool
    out_of_stock: bool
    total_value: Decimal
    status: str


@dataclass
class ProductSearchDTO:
    """AND-combined product filter. Unset criteria match everything."""

    search_term: Optional[str] = None
    category: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    low_stock_only: bool = False
    out_of_stock_only: bool = False


@dataclass
class BatchOperationResultDTO:
    """Outcome of a batch where each item succeeds or fails on its own."""

    total_processed: int = 0
    successful: int = 0
    errors: int = 0
    error_details: list[str] = field(default_factory=list)
