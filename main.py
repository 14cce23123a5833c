"""Main application entry point for the inventory stock ledger."""

import logging
import time

import schedule

from src.common.config.settings import settings
from src.common.exceptions.custom_exceptions import ApplicationError, DatabaseError
from src.common.logger_config import setup_logging
from src.common.metrics import InventoryMetrics
from src.product_domain.application.product_service import ProductApplicationService
from src.product_domain.infrastructure.persistence.mysql_product_repository import MySQLProductRepository
from src.stock_domain.application.stock_service import StockApplicationService
from src.stock_domain.infrastructure.persistence.mysql_stock_movement_repository import (
    MySQLStockMovementRepository,
)

logger = logging.getLogger(__name__)


def setup_dependencies() -> tuple[ProductApplicationService, StockApplicationService]:
    """Initializes and wires up the product and stock services."""
    metrics = InventoryMetrics()
    product_repository = MySQLProductRepository()
    movement_repository = MySQLStockMovementRepository()

    product_service = ProductApplicationService(product_repo=product_repository, metrics=metrics)
    stock_service = StockApplicationService(
        product_repo=product_repository, movement_repo=movement_repository, metrics=metrics
    )
    return product_service, stock_service


def create_inventory_tables() -> None:
    """Creates tables for the product and stock domains."""
    product_repo = MySQLProductRepository()
    movement_repo = MySQLStockMovementRepository()
    try:
        product_repo.create_tables()
        movement_repo.create_tables()
    except DatabaseError as e:
        logger.error(f"Error creating inventory database tables: {e}")
        raise
    finally:
        product_repo.close()
        movement_repo.close()


def log_inventory_summary(product_service: ProductApplicationService) -> None:
    """Logs the inventory gauges: product count, low and out of stock counts, total value."""
    try:
        summary = product_service.get_inventory_summary()
    except ApplicationError as e:
        logger.error(f"Could not build inventory summary: {e}")
        return

    logger.info(
        f"Inventory: {summary['total_products']} products in {summary['categories']} categories, "
        f"{summary['low_stock_count']} low stock, {summary['out_of_stock_count']} out of stock, "
        f"total value {summary['total_value']}"
    )
    for product in summary["out_of_stock_products"]:
        logger.warning(f"Out of stock: {product.name} (id {product.id})")
    for product in summary["low_stock_products"]:
        if not product.out_of_stock:
            logger.warning(
                f"Low stock: {product.name} (id {product.id}) has {product.quantity}, minimum {product.minimum_stock}"
            )


if __name__ == "__main__":
    setup_logging()
    logger.info("Inventory stock ledger started.")

    create_inventory_tables()
    product_service, _ = setup_dependencies()

    log_inventory_summary(product_service)

    logger.info(f"Scheduling inventory summary every {settings.SUMMARY_INTERVAL_MINUTES} minutes.")
    schedule.every(settings.SUMMARY_INTERVAL_MINUTES).minutes.do(log_inventory_summary, product_service)

    while True:
        schedule.run_pending()
        time.sleep(1)  # Wait one second before checking again
