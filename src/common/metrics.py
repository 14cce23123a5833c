"""Process-wide inventory counters injected into the application services."""

from threading import Lock


class InventoryMetrics:
    """Thread-safe counters for product lifecycle and stock movement events.

    Counters are purely observational; nothing in the stock ledger reads them.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._products_created = 0
        self._products_deleted = 0
        self._stock_movements: dict[str, int] = {}

    def increment_products_created(self) -> None:
        with self._lock:
            self._products_created += 1

    def increment_products_deleted(self) -> None:
        with self._lock:
            self._products_deleted += 1

    def increment_stock_movements(self, movement_type: str) -> None:
        with self._lock:
            self._stock_movements[movement_type] = self._stock_movements.get(movement_type, 0) + 1

    @property
    def products_created(self) -> int:
        return self._products_created

    @property
    def products_deleted(self) -> int:
        return self._products_deleted

    def stock_movements(self, movement_type: str | None = None) -> int:
        """Returns the movement count for one type, or across all types."""
        with self._lock:
            if movement_type is None:
                return sum(self._stock_movements.values())
            return self._stock_movements.get(movement_type, 0)

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "products_created": self._products_created,
                "products_deleted": self._products_deleted,
                "stock_movements": dict(self._stock_movements),
            }
