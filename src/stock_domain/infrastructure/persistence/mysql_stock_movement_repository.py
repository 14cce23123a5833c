# src/stock_domain/infrastructure/persistence/mysql_stock_movement_repository.py
"""MySQL implementation of the Stock ledger repository."""

import logging
from dataclasses import replace
from typing import Optional

from mysql.connector import Error

from src.common.exceptions.custom_exceptions import ApplicationError, DatabaseError, NotFoundError
from src.common.persistence.mysql_base import MySQLRepositoryBase
from src.common.utils.date_utils import format_datetime_for_db, parse_datetime_from_db
from src.product_domain.infrastructure.persistence.mysql_product_repository import (
    PRODUCT_COLUMNS,
    product_from_row,
)
from src.stock_domain.domain.entities.stock_movement import MovementType, StockMovement
from src.stock_domain.domain.repositories.stock_movement_repository import (
    IStockMovementRepository,
    MovementPlanner,
)

logger = logging.getLogger(__name__)

MOVEMENT_COLUMNS = "id, product_id, movement_type, quantity, previous_quantity, new_quantity, reason, username, timestamp"


def movement_from_row(row: dict) -> StockMovement:
    """Builds a StockMovement entity from a dictionary cursor row."""
    return StockMovement(
        id=row["id"],
        product_id=row["product_id"],
        movement_type=MovementType(row["movement_type"]),
        quantity=row["quantity"],
        previous_quantity=row["previous_quantity"],
        new_quantity=row["new_quantity"],
        reason=row["reason"],
        username=row["username"],
        timestamp=parse_datetime_from_db(row["timestamp"]),
    )


class MySQLStockMovementRepository(MySQLRepositoryBase, IStockMovementRepository):
    """MySQL implementation of the Stock ledger. Each movement is one InnoDB transaction."""

    def create_tables(self) -> None:
        """Creates the stock movements table with 'inv_' prefix."""
        # No foreign key to inv_products: history must survive product deletion
        create_movements_table_query = """
        CREATE TABLE IF NOT EXISTS inv_stock_movements (
            id BIGINT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
            product_id BIGINT UNSIGNED NOT NULL,
            movement_type VARCHAR(20) NOT NULL,
            quantity INT UNSIGNED NOT NULL,
            previous_quantity INT UNSIGNED NOT NULL,
            new_quantity INT UNSIGNED NOT NULL,
            reason VARCHAR(500),
            username VARCHAR(255) NOT NULL,
            timestamp DATETIME(6) NOT NULL,
            INDEX idx_product_timestamp (product_id, timestamp),
            INDEX idx_timestamp (timestamp)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(create_movements_table_query)
            conn.commit()
            logger.info("Inventory stock movements table checked/created.")
        except Error as e:
            conn.rollback()
            raise DatabaseError(f"Error creating inventory stock movements table: {e}", original_exception=e)
        finally:
            cursor.close()

    def apply_movement(self, product_id: int, planner: MovementPlanner) -> StockMovement:
        """Locks the product row, applies the planned movement and appends it in one transaction."""
        conn = self._get_connection()
        cursor = conn.cursor(dictionary=True)

        insert_query = """
        INSERT INTO inv_stock_movements
        (product_id, movement_type, quantity, previous_quantity, new_quantity, reason, username, timestamp)
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
        """

        try:
            cursor.execute(f"SELECT {PRODUCT_COLUMNS} FROM inv_products WHERE id = %s FOR UPDATE", (product_id,))
            row = cursor.fetchone()
            if row is None:
                raise NotFoundError(f"Product not found with id: {product_id}", entity_id=product_id)

            movement = planner(product_from_row(row))

            cursor.execute(
                "UPDATE inv_products SET quantity = %s WHERE id = %s",
                (movement.new_quantity, product_id),
            )
            cursor.execute(
                insert_query,
                (
                    movement.product_id,
                    movement.movement_type.value,
                    movement.quantity,
                    movement.previous_quantity,
                    movement.new_quantity,
                    movement.reason,
                    movement.username,
                    format_datetime_for_db(movement.timestamp),
                ),
            )
            movement_id = cursor.lastrowid
            conn.commit()
        except Error as e:
            conn.rollback()
            raise self._translate_error(f"Error applying stock movement to product {product_id}", e)
        except ApplicationError:
            conn.rollback()
            raise
        finally:
            cursor.close()
        return replace(movement, id=movement_id)

    def get_movements_by_product(self, product_id: int) -> list[StockMovement]:
        """Retrieves all movements of a product, oldest first."""
        conn = self._get_connection()
        cursor = conn.cursor(dictionary=True)
        try:
            cursor.execute(
                f"SELECT {MOVEMENT_COLUMNS} FROM inv_stock_movements WHERE product_id = %s ORDER BY timestamp, id",
                (product_id,),
            )
            rows = cursor.fetchall()
            conn.commit()  # Release the read snapshot
        except Error as e:
            raise DatabaseError(f"Error fetching stock history for product {product_id}: {e}", original_exception=e)
        finally:
            cursor.close()
        return [movement_from_row(row) for row in rows]

    def get_movement_by_id(self, movement_id: int) -> Optional[StockMovement]:
        """Retrieves a single movement."""
        conn = self._get_connection()
        cursor = conn.cursor(dictionary=True)
        try:
            cursor.execute(f"SELECT {MOVEMENT_COLUMNS} FROM inv_stock_movements WHERE id = %s LIMIT 1", (movement_id,))
            row = cursor.fetchone()
            conn.commit()
        except Error as e:
            raise DatabaseError(f"Error fetching stock movement {movement_id}: {e}", original_exception=e)
        finally:
            cursor.close()
        return movement_from_row(row) if row else None

    def get_recent_movements(self, limit: int) -> list[StockMovement]:
        """Retrieves the newest movements across all products."""
        conn = self._get_connection()
        cursor = conn.cursor(dictionary=True)
        try:
            cursor.execute(
                f"SELECT {MOVEMENT_COLUMNS} FROM inv_stock_movements ORDER BY timestamp DESC, id DESC LIMIT %s",
                (limit,),
            )
            rows = cursor.fetchall()
            conn.commit()
        except Error as e:
            raise DatabaseError(f"Error fetching recent stock movements: {e}", original_exception=e)
        finally:
            cursor.close()
        return [movement_from_row(row) for row in rows]

    def __del__(self) -> None:
        """Closes the database connection when the object is destroyed."""
        if hasattr(self, "_local"):
            self.close()
