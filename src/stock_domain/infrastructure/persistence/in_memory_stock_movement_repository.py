"""In-memory implementation of the Stock ledger repository."""

from dataclasses import replace
from typing import Optional

from src.common.exceptions.custom_exceptions import NotFoundError
from src.common.persistence.in_memory_store import InMemoryInventoryStore
from src.stock_domain.domain.entities.stock_movement import StockMovement
from src.stock_domain.domain.repositories.stock_movement_repository import (
    IStockMovementRepository,
    MovementPlanner,
)


class InMemoryStockMovementRepository(IStockMovementRepository):
    """Stock ledger over an InMemoryInventoryStore, serializing movements per product."""

    def __init__(self, store: InMemoryInventoryStore) -> None:
        self.store = store

    def apply_movement(self, product_id: int, planner: MovementPlanner) -> StockMovement:
        lock = self.store.product_lock(product_id)
        with lock:
            product = self.store.find_product(product_id)
            if product is None:
                # Deleted while we waited for the lock
                raise NotFoundError(f"Product not found with id: {product_id}", entity_id=product_id)

            movement = planner(replace(product))
            stored = replace(movement, id=self.store.next_movement_id())

            with self.store.registry_lock:
                product.quantity = stored.new_quantity
                product.updated_at = stored.timestamp
                self.store.movements.append(stored)
        return stored

    def get_movements_by_product(self, product_id: int) -> list[StockMovement]:
        with self.store.registry_lock:
            movements = [m for m in self.store.movements if m.product_id == product_id]
        return sorted(movements, key=lambda m: (m.timestamp, m.id))

    def get_movement_by_id(self, movement_id: int) -> Optional[StockMovement]:
        with self.store.registry_lock:
            for movement in self.store.movements:
                if movement.id == movement_id:
                    return movement
        return None

    def get_recent_movements(self, limit: int) -> list[StockMovement]:
        with self.store.registry_lock:
            movements = list(self.store.movements)
        movements.sort(key=lambda m: (m.timestamp, m.id), reverse=True)
        return movements[:limit]
