# src/product_domain/infrastructure/persistence/mysql_product_repository.py
"""MySQL implementation of the Product repository."""

import logging
from typing import Any, Optional

from mysql.connector import Error

from src.common.exceptions.custom_exceptions import DatabaseError
from src.common.persistence.mysql_base import MySQLRepositoryBase
from src.common.utils.date_utils import parse_datetime_from_db
from src.product_domain.domain.entities.product import Product
from src.product_domain.domain.repositories.product_repository import IProductRepository

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = "id, name, description, category, price, quantity, minimum_stock, created_at, updated_at"

# Columns an update may touch; everything else is owned by the database or the stock ledger
UPDATABLE_COLUMNS = ("name", "description", "category", "price", "quantity", "minimum_stock")


def product_from_row(row: dict) -> Product:
    """Builds a Product entity from a dictionary cursor row."""
    return Product(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        category=row["category"],
        price=row["price"],
        quantity=row["quantity"],
        minimum_stock=row["minimum_stock"],
        created_at=parse_datetime_from_db(row.get("created_at")),
        updated_at=parse_datetime_from_db(row.get("updated_at")),
    )


class MySQLProductRepository(MySQLRepositoryBase, IProductRepository):
    """MySQL implementation of the Product Repository."""

    def create_tables(self) -> None:
        """Creates the products table with 'inv_' prefix."""
        create_products_table_query = """
        CREATE TABLE IF NOT EXISTS inv_products (
            id BIGINT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
            name VARCHAR(255) NOT NULL,
            description TEXT,
            category VARCHAR(255),
            price DECIMAL(12, 2) NOT NULL DEFAULT 0,
            quantity INT UNSIGNED NOT NULL DEFAULT 0,
            minimum_stock INT UNSIGNED NOT NULL DEFAULT 0,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
            INDEX idx_category (category),
            INDEX idx_name (name)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(create_products_table_query)
            conn.commit()
            logger.info("Inventory products table checked/created.")
        except Error as e:
            conn.rollback()
            raise DatabaseError(f"Error creating inventory products table: {e}", original_exception=e)
        finally:
            cursor.close()

    def save_product(self, product: Product) -> Product:
        """Inserts a new product and reads it back with its assigned id."""
        conn = self._get_connection()
        cursor = conn.cursor(dictionary=True)

        insert_query = """
        INSERT INTO inv_products (name, description, category, price, quantity, minimum_stock)
        VALUES (%s, %s, %s, %s, %s, %s)
        """
        params = (
            product.name,
            product.description,
            product.category,
            product.price,
            product.quantity,
            product.minimum_stock,
        )

        try:
            cursor.execute(insert_query, params)
            product_id = cursor.lastrowid
            cursor.execute(f"SELECT {PRODUCT_COLUMNS} FROM inv_products WHERE id = %s", (product_id,))
            row = cursor.fetchone()
            conn.commit()
        except Error as e:
            conn.rollback()
            raise DatabaseError(f"Error saving product {product.name}: {e}", original_exception=e)
        finally:
            cursor.close()
        return product_from_row(row)

    def update_product(self, product_id: int, changes: dict[str, Any]) -> Optional[Product]:
        """Updates only the given columns, so a concurrent stock movement is never overwritten with a stale quantity."""
        unknown = set(changes) - set(UPDATABLE_COLUMNS)
        if unknown:
            raise ValueError(f"Columns cannot be updated: {', '.join(sorted(unknown))}")

        conn = self._get_connection()
        cursor = conn.cursor(dictionary=True)
        try:
            if changes:
                columns = [column for column in UPDATABLE_COLUMNS if column in changes]
                assignments = ", ".join(f"{column} = %s" for column in columns)
                params = [changes[column] for column in columns] + [product_id]
                cursor.execute(f"UPDATE inv_products SET {assignments} WHERE id = %s", params)
            cursor.execute(f"SELECT {PRODUCT_COLUMNS} FROM inv_products WHERE id = %s", (product_id,))
            row = cursor.fetchone()
            conn.commit()
        except Error as e:
            conn.rollback()
            raise self._translate_error(f"Error updating product {product_id}", e)
        finally:
            cursor.close()
        return product_from_row(row) if row else None

    def delete_product(self, product_id: int) -> bool:
        """Hard-deletes the product row. Ledger rows keep their dangling product_id."""
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute("DELETE FROM inv_products WHERE id = %s", (product_id,))
            deleted = cursor.rowcount > 0
            conn.commit()
        except Error as e:
            conn.rollback()
            raise self._translate_error(f"Error deleting product {product_id}", e)
        finally:
            cursor.close()
        return deleted

    def get_product_by_id(self, product_id: int) -> Optional[Product]:
        """Retrieves a product by id."""
        conn = self._get_connection()
        cursor = conn.cursor(dictionary=True)
        try:
            cursor.execute(f"SELECT {PRODUCT_COLUMNS} FROM inv_products WHERE id = %s LIMIT 1", (product_id,))
            row = cursor.fetchone()
            conn.commit()  # Release the read snapshot
        except Error as e:
            raise DatabaseError(f"Error fetching product {product_id}: {e}", original_exception=e)
        finally:
            cursor.close()
        return product_from_row(row) if row else None

    def get_all_products(self) -> list[Product]:
        """Retrieves all products ordered by id."""
        conn = self._get_connection()
        cursor = conn.cursor(dictionary=True)
        try:
            cursor.execute(f"SELECT {PRODUCT_COLUMNS} FROM inv_products ORDER BY id")
            rows = cursor.fetchall()
            conn.commit()
        except Error as e:
            raise DatabaseError(f"Error fetching products: {e}", original_exception=e)
        finally:
            cursor.close()
        return [product_from_row(row) for row in rows]

    def get_all_categories(self) -> list[str]:
        """Retrieves all distinct categories from inv_products table."""
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(
                "SELECT DISTINCT category FROM inv_products WHERE category IS NOT NULL AND category != '' ORDER BY category"
            )
            results = cursor.fetchall()
            conn.commit()
            return [row[0] for row in results]
        except Error as e:
            raise DatabaseError(f"Error fetching categories: {e}", original_exception=e)
        finally:
            cursor.close()

    def __del__(self) -> None:
        """Closes the database connection when the object is destroyed."""
        if hasattr(self, "_local"):
            self.close()
