# src/stock_domain/application/stock_service.py
"""Application service for stock movements: the stock ledger engine."""

import logging
import time

from src.common.config.settings import settings
from src.common.dtos.product_dtos import BatchOperationResultDTO
from src.common.dtos.stock_dtos import StockAdjustmentRequestDTO
from src.common.exceptions.custom_exceptions import (
    ApplicationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.common.metrics import InventoryMetrics
from src.common.utils.date_utils import utc_now
from src.product_domain.domain.entities.product import Product
from src.product_domain.domain.repositories.product_repository import IProductRepository
from src.stock_domain.domain.entities.stock_movement import MovementType, StockMovement
from src.stock_domain.domain.repositories.stock_movement_repository import IStockMovementRepository
from src.stock_domain.domain.services.stock_domain_service import (
    create_movement,
    validate_non_negative_quantity,
    validate_positive_quantity,
    validate_username,
)

logger = logging.getLogger(__name__)


class StockApplicationService:
    """
    Registers stock movements and answers stock queries.

    Every mutation runs as one unit in the ledger repository: the product row is
    locked, the new quantity is computed from the locked state, and the updated
    quantity and the ledger entry are committed together. Transactions aborted by
    contention are retried up to ``max_retries`` times, after which the
    ConflictError reaches the caller.
    """

    def __init__(
        self,
        product_repo: IProductRepository,
        movement_repo: IStockMovementRepository,
        metrics: InventoryMetrics | None = None,
        max_retries: int | None = None,
        retry_backoff_seconds: float | None = None,
    ) -> None:
        self.product_repo = product_repo
        self.movement_repo = movement_repo
        self.metrics = metrics or InventoryMetrics()
        self.max_retries = settings.STOCK_MAX_RETRIES if max_retries is None else max_retries
        self.retry_backoff_seconds = (
            settings.STOCK_RETRY_BACKOFF_SECONDS if retry_backoff_seconds is None else retry_backoff_seconds
        )

    def register_stock_in(self, product_id: int, quantity: int, reason: str | None, username: str) -> StockMovement:
        """Adds ``quantity`` units to the product."""
        validate_positive_quantity(quantity)
        validate_username(username)
        return self._apply(product_id, MovementType.STOCK_IN, quantity, reason, username)

    def register_stock_out(self, product_id: int, quantity: int, reason: str | None, username: str) -> StockMovement:
        """Removes ``quantity`` units. Raises InsufficientStockError rather than going below zero."""
        validate_positive_quantity(quantity)
        validate_username(username)
        return self._apply(product_id, MovementType.STOCK_OUT, quantity, reason, username)

    def register_adjustment(
        self, product_id: int, new_quantity: int, reason: str | None, username: str
    ) -> StockMovement:
        """Sets the product quantity to ``new_quantity``, recording the absolute difference."""
        validate_non_negative_quantity(new_quantity)
        validate_username(username)
        return self._apply(product_id, MovementType.ADJUSTMENT, new_quantity, reason, username)

    def has_sufficient_stock(self, product_id: int, required_quantity: int) -> bool:
        """True iff the product holds at least ``required_quantity`` units. Any integer requirement is accepted."""
        product = self._get_product(product_id)
        if not isinstance(required_quantity, int) or isinstance(required_quantity, bool):
            raise ValidationError(
                f"required_quantity must be an integer, got {required_quantity!r}", fields=["required_quantity"]
            )
        return product.quantity >= required_quantity

    def get_current_stock(self, product_id: int) -> int:
        return self._get_product(product_id).quantity

    def get_product_history(self, product_id: int) -> list[StockMovement]:
        """
        Returns a snapshot of every ledger entry of the product, oldest first.

        Entries of a deleted product stay readable, so an unknown id yields an
        empty list rather than NotFoundError.
        """
        return self.movement_repo.get_movements_by_product(product_id)

    def get_movement(self, movement_id: int) -> StockMovement:
        movement = self.movement_repo.get_movement_by_id(movement_id)
        if movement is None:
            raise NotFoundError(f"Stock movement not found with id: {movement_id}", entity_id=movement_id)
        return movement

    def get_recent_movements(self, limit: int = 20) -> list[StockMovement]:
        """Returns the newest ledger entries across all products, newest first."""
        validate_positive_quantity(limit, field="limit")
        return self.movement_repo.get_recent_movements(limit)

    def bulk_adjust(self, updates: list[StockAdjustmentRequestDTO], username: str) -> BatchOperationResultDTO:
        """Applies one adjustment per item. Each item is its own movement; failures do not stop the batch."""
        validate_username(username)
        result = BatchOperationResultDTO(total_processed=len(updates))

        for update in updates:
            reason = update.reason or settings.BULK_ADJUSTMENT_REASON
            try:
                self.register_adjustment(update.product_id, update.quantity, reason, username)
                result.successful += 1
            except ApplicationError as e:
                result.errors += 1
                result.error_details.append(f"Product ID {update.product_id}: {e}")
                logger.error(f"Bulk adjustment failed for product {update.product_id}: {e}")

        logger.info(
            f"Bulk adjustment completed: {result.successful} applied, {result.errors} failed "
            f"of {result.total_processed}"
        )
        return result

    def _apply(
        self, product_id: int, movement_type: MovementType, amount: int, reason: str | None, username: str
    ) -> StockMovement:
        """Runs the movement transaction, retrying when it loses a concurrency conflict."""

        def planner(product: Product) -> StockMovement:
            # Called while the product is locked, so timestamps follow commit order
            return create_movement(product, movement_type, amount, reason, username, timestamp=utc_now())

        attempt = 0
        while True:
            attempt += 1
            try:
                movement = self.movement_repo.apply_movement(product_id, planner)
                break
            except ConflictError as e:
                if attempt > self.max_retries:
                    logger.error(f"{movement_type.value} on product {product_id} failed after {attempt} attempts: {e}")
                    raise
                logger.warning(
                    f"{movement_type.value} on product {product_id} conflicted (attempt {attempt}), retrying: {e}"
                )
                time.sleep(self.retry_backoff_seconds * attempt)

        self.metrics.increment_stock_movements(movement_type.value)
        logger.info(
            f"{movement.movement_type.value} #{movement.id} on product {product_id} by {username}: "
            f"{movement.previous_quantity} -> {movement.new_quantity}"
        )
        return movement

    def _get_product(self, product_id: int) -> Product:
        product = self.product_repo.get_product_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product not found with id: {product_id}", entity_id=product_id)
        return product
