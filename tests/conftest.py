# tests/conftest.py
from datetime import datetime
from decimal import Decimal
from unittest.mock import Mock

import pytest
import pytz

from src.common.config.settings import settings
from src.common.metrics import InventoryMetrics
from src.common.persistence.in_memory_store import InMemoryInventoryStore
from src.product_domain.application.product_service import ProductApplicationService
from src.product_domain.domain.entities.product import Product
from src.product_domain.infrastructure.persistence.in_memory_product_repository import InMemoryProductRepository
from src.product_domain.infrastructure.persistence.mysql_product_repository import MySQLProductRepository
from src.stock_domain.application.stock_service import StockApplicationService
from src.stock_domain.domain.entities.stock_movement import MovementType, StockMovement
from src.stock_domain.infrastructure.persistence.in_memory_stock_movement_repository import (
    InMemoryStockMovementRepository,
)
from src.stock_domain.infrastructure.persistence.mysql_stock_movement_repository import (
    MySQLStockMovementRepository,
)


@pytest.fixture(autouse=True)
def mock_settings_stock_engine(mocker) -> None:
    """Keeps retry behaviour deterministic and fast in every test."""
    mocker.patch.object(settings, "STOCK_MAX_RETRIES", 3)
    mocker.patch.object(settings, "STOCK_RETRY_BACKOFF_SECONDS", 0)
    mocker.patch.object(settings, "BULK_ADJUSTMENT_REASON", "Bulk update via API")


@pytest.fixture
def mock_product_repository() -> Mock:
    """Mock for MySQLProductRepository."""
    # We specify the actual class for a more accurate mock spec
    return Mock(spec=MySQLProductRepository)


@pytest.fixture
def mock_stock_movement_repository() -> Mock:
    """Mock for MySQLStockMovementRepository."""
    return Mock(spec=MySQLStockMovementRepository)


@pytest.fixture
def metrics() -> InventoryMetrics:
    return InventoryMetrics()


@pytest.fixture
def product_service(mock_product_repository, metrics) -> ProductApplicationService:
    """Instance of ProductApplicationService with a mocked repository."""
    return ProductApplicationService(product_repo=mock_product_repository, metrics=metrics)


@pytest.fixture
def stock_service(mock_product_repository, mock_stock_movement_repository, metrics) -> StockApplicationService:
    """Instance of StockApplicationService with mocked repositories."""
    return StockApplicationService(
        product_repo=mock_product_repository, movement_repo=mock_stock_movement_repository, metrics=metrics
    )


@pytest.fixture
def inventory_store() -> InMemoryInventoryStore:
    return InMemoryInventoryStore()


@pytest.fixture
def in_memory_product_repository(inventory_store) -> InMemoryProductRepository:
    return InMemoryProductRepository(inventory_store)


@pytest.fixture
def in_memory_stock_movement_repository(inventory_store) -> InMemoryStockMovementRepository:
    return InMemoryStockMovementRepository(inventory_store)


@pytest.fixture
def in_memory_product_service(in_memory_product_repository, metrics) -> ProductApplicationService:
    """ProductApplicationService backed by the in-memory store."""
    return ProductApplicationService(product_repo=in_memory_product_repository, metrics=metrics)


@pytest.fixture
def in_memory_stock_service(
    in_memory_product_repository, in_memory_stock_movement_repository, metrics
) -> StockApplicationService:
    """StockApplicationService backed by the same in-memory store as in_memory_product_service."""
    return StockApplicationService(
        product_repo=in_memory_product_repository,
        movement_repo=in_memory_stock_movement_repository,
        metrics=metrics,
    )


@pytest.fixture
def sample_product() -> Product:
    """Sample stored product: 50 units, minimum stock 5."""
    return Product(
        id=1,
        name="Laptop HP",
        description="High-end laptop",
        category="Electronics",
        price=Decimal("999.99"),
        quantity=50,
        minimum_stock=5,
    )


@pytest.fixture
def sample_product_row() -> dict:
    """Row as returned by a dictionary cursor on inv_products."""
    return {
        "id": 1,
        "name": "Laptop HP",
        "description": "High-end laptop",
        "category": "Electronics",
        "price": Decimal("999.99"),
        "quantity": 50,
        "minimum_stock": 5,
        "created_at": datetime(2024, 3, 1, 9, 0, 0),
        "updated_at": datetime(2024, 3, 1, 9, 0, 0),
    }


@pytest.fixture
def sample_stock_movement() -> StockMovement:
    """Sample STOCK_IN ledger entry for sample_product."""
    return StockMovement(
        id=1,
        product_id=1,
        movement_type=MovementType.STOCK_IN,
        quantity=10,
        previous_quantity=50,
        new_quantity=60,
        reason="Supplier delivery",
        username="testuser",
        timestamp=datetime(2024, 3, 1, 10, 0, 0, tzinfo=pytz.utc),
    )
