# src/product_domain/domain/repositories/product_repository.py
"""Product repository interface."""
from abc import ABC, abstractmethod
from typing import Any, Optional

from src.product_domain.domain.entities.product import Product


class IProductRepository(ABC):

    @abstractmethod
    def save_product(self, product: Product) -> Product:
        """Inserts a new product and returns it with its assigned id."""
        pass

    @abstractmethod
    def update_product(self, product_id: int, changes: dict[str, Any]) -> Optional[Product]:
        """Applies only the given column changes in one statement. Returns None if the product is absent."""
        pass

    @abstractmethod
    def delete_product(self, product_id: int) -> bool:
        """Removes a product. Returns False if it did not exist."""
        pass

    @abstractmethod
    def get_product_by_id(self, product_id: int) -> Optional[Product]:
        """Retrieves a product by id."""
        pass

    @abstractmethod
    def get_all_products(self) -> list[Product]:
        """Retrieves all products in insertion order."""
        pass

    @abstractmethod
    def get_all_categories(self) -> list[str]:
        """Retrieves the distinct non-empty categories, sorted."""
        pass
