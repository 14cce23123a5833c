"""Thread-safe in-memory backing store shared by the in-memory repositories."""

import itertools
from threading import Lock
from typing import Optional

from src.common.exceptions.custom_exceptions import NotFoundError
from src.product_domain.domain.entities.product import Product
from src.stock_domain.domain.entities.stock_movement import StockMovement


class InMemoryInventoryStore:
    """
    Holds products and the stock ledger in process memory.

    Every product has its own lock, so mutations of one product serialize while
    different products never contend. ``registry_lock`` guards the product map,
    the ledger list and the id sequences. Lock order is always product lock
    first, then registry lock.
    """

    def __init__(self) -> None:
        self.registry_lock = Lock()
        self.products: dict[int, Product] = {}
        self.movements: list[StockMovement] = []
        self._product_locks: dict[int, Lock] = {}
        self._product_ids = itertools.count(1)
        self._movement_ids = itertools.count(1)

    def next_product_id(self) -> int:
        return next(self._product_ids)

    def next_movement_id(self) -> int:
        return next(self._movement_ids)

    def add_product(self, product: Product) -> None:
        with self.registry_lock:
            self.products[product.id] = product
            self._product_locks[product.id] = Lock()

    def remove_product(self, product_id: int) -> None:
        with self.registry_lock:
            self.products.pop(product_id, None)
            self._product_locks.pop(product_id, None)

    def product_lock(self, product_id: int) -> Lock:
        """Returns the lock of an existing product."""
        with self.registry_lock:
            lock = self._product_locks.get(product_id)
        if lock is None:
            raise NotFoundError(f"Product not found with id: {product_id}", entity_id=product_id)
        return lock

    def find_product(self, product_id: int) -> Optional[Product]:
        with self.registry_lock:
            return self.products.get(product_id)
