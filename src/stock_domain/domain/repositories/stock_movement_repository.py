# src/stock_domain/domain/repositories/stock_movement_repository.py
"""Stock ledger repository interface."""
from abc import ABC, abstractmethod
from typing import Callable, Optional

from src.product_domain.domain.entities.product import Product
from src.stock_domain.domain.entities.stock_movement import StockMovement

MovementPlanner = Callable[[Product], StockMovement]


class IStockMovementRepository(ABC):

    @abstractmethod
    def apply_movement(self, product_id: int, planner: MovementPlanner) -> StockMovement:
        """
        Atomically applies one stock movement to a product.

        Locks the product, passes its current state to ``planner``, stores
        ``movement.new_quantity`` on the product and appends the movement.
        Either both writes become visible or neither does. Exceptions raised by
        the planner abort the unit without effect.

        Raises NotFoundError if the product does not exist and ConflictError when
        a concurrent transaction prevented the update.
        """
        pass

    @abstractmethod
    def get_movements_by_product(self, product_id: int) -> list[StockMovement]:
        """Retrieves all movements of a product, oldest first."""
        pass

    @abstractmethod
    def get_movement_by_id(self, movement_id: int) -> Optional[StockMovement]:
        """Retrieves a single movement."""
        pass

    @abstractmethod
    def get_recent_movements(self, limit: int) -> list[StockMovement]:
        """Retrieves the newest movements across all products, newest first."""
        pass
