"""In-memory implementation of the Product repository."""

import logging
from dataclasses import replace
from typing import Any, Optional

from src.common.exceptions.custom_exceptions import NotFoundError
from src.common.persistence.in_memory_store import InMemoryInventoryStore
from src.common.utils.date_utils import utc_now
from src.product_domain.domain.entities.product import Product
from src.product_domain.domain.repositories.product_repository import IProductRepository

logger = logging.getLogger(__name__)


class InMemoryProductRepository(IProductRepository):
    """Product repository over an InMemoryInventoryStore. Returns copies, never live records."""

    def __init__(self, store: InMemoryInventoryStore) -> None:
        self.store = store

    def save_product(self, product: Product) -> Product:
        now = utc_now()
        stored = replace(product, id=self.store.next_product_id(), created_at=now, updated_at=now)
        self.store.add_product(stored)
        logger.debug(f"Stored product {stored.id} ({stored.name})")
        return replace(stored)

    def update_product(self, product_id: int, changes: dict[str, Any]) -> Optional[Product]:
        try:
            lock = self.store.product_lock(product_id)
        except NotFoundError:
            return None
        with lock:
            current = self.store.find_product(product_id)
            if current is None:
                return None
            updated = replace(current, **changes, updated_at=utc_now())
            with self.store.registry_lock:
                self.store.products[product_id] = updated
            return replace(updated)

    def delete_product(self, product_id: int) -> bool:
        try:
            lock = self.store.product_lock(product_id)
        except NotFoundError:
            return False
        with lock:
            if self.store.find_product(product_id) is None:
                return False
            self.store.remove_product(product_id)
        return True

    def get_product_by_id(self, product_id: int) -> Optional[Product]:
        try:
            lock = self.store.product_lock(product_id)
        except NotFoundError:
            return None
        with lock:
            product = self.store.find_product(product_id)
            return replace(product) if product else None

    def get_all_products(self) -> list[Product]:
        with self.store.registry_lock:
            ids = sorted(self.store.products)
        products = [self.get_product_by_id(product_id) for product_id in ids]
        return [product for product in products if product is not None]

    def get_all_categories(self) -> list[str]:
        with self.store.registry_lock:
            categories = {p.category for p in self.store.products.values() if p.category and p.category.strip()}
        return sorted(categories)
