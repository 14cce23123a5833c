"""Shared MySQL connection handling for the repositories."""

import logging
import threading

import mysql.connector
from mysql.connector import Error, errorcode

from src.common.config.settings import settings
from src.common.exceptions.custom_exceptions import ConflictError, DatabaseError

logger = logging.getLogger(__name__)

# Errors raised when another transaction holds or contends for the same rows
CONFLICT_ERRNOS = (errorcode.ER_LOCK_DEADLOCK, errorcode.ER_LOCK_WAIT_TIMEOUT)


class MySQLRepositoryBase:
    """Keeps one MySQL connection per thread so concurrent callers never share a session."""

    def __init__(self) -> None:
        self._local = threading.local()

    def _get_connection(self):
        """Establishes or returns this thread's active MySQL database connection."""
        connection = getattr(self._local, "connection", None)
        if not connection or not connection.is_connected():
            try:
                connection = mysql.connector.connect(
                    host=settings.DB_HOST,
                    port=settings.DB_PORT,
                    database=settings.DB_DATABASE,
                    user=settings.DB_USER,
                    password=settings.DB_PASSWORD,
                    autocommit=False,  # Better control over transactions
                    charset="utf8mb4",
                    use_unicode=True,
                )
            except Error as e:
                raise DatabaseError(f"Failed to connect to MySQL: {e}", original_exception=e)
            self._local.connection = connection
        return connection

    @staticmethod
    def _translate_error(message: str, error: Error) -> DatabaseError:
        """Maps a driver error to ConflictError for lock contention, DatabaseError otherwise."""
        if getattr(error, "errno", None) in CONFLICT_ERRNOS:
            return ConflictError(f"{message}: {error}", original_exception=error)
        return DatabaseError(f"{message}: {error}", original_exception=error)

    def close(self) -> None:
        """Closes this thread's connection, if any."""
        connection = getattr(self._local, "connection", None)
        if connection and connection.is_connected():
            connection.close()
        self._local.connection = None
