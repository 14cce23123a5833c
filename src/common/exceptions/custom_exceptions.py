"""Custom application-wide exceptions."""


class ApplicationError(Exception):
    """Base class for application-specific errors."""

    def __init__(
        self, message: str = "An application error occurred", original_exception: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_exception = original_exception
        self.message = message

    def __str__(self) -> str:
        if self.original_exception:
            return f"{self.message} (Original error: {self.original_exception})"
        return self.message


class DatabaseError(ApplicationError):
    """Exception raised for errors during database operations."""

    def __init__(self, message: str = "Database operation failed", original_exception: Exception | None = None) -> None:
        super().__init__(message, original_exception)
        self.message = f"Database Error: {message}"


class ConflictError(DatabaseError):
    """A concurrent mutation invalidated the in-flight transaction. Safe to retry."""

    retryable = True

    def __init__(
        self, message: str = "Concurrent modification detected", original_exception: Exception | None = None
    ) -> None:
        super().__init__(message, original_exception)
        self.message = f"Conflict: {message}"


class ValidationError(ApplicationError):
    """Exception raised for malformed input. Raised before any state change."""

    def __init__(self, message: str = "Validation failed", fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []
        self.message = f"Validation Error: {message}"


class NotFoundError(ValidationError):
    """Exception raised when a referenced entity does not exist."""

    def __init__(self, message: str = "Entity not found", entity_id: int | None = None) -> None:
        super().__init__(message, fields=["id"])
        self.entity_id = entity_id
        self.message = f"Not Found: {message}"


class InsufficientStockError(ApplicationError):
    """Exception raised when a stock exit exceeds the available quantity."""

    def __init__(self, product_id: int, available: int, requested: int) -> None:
        super().__init__(
            f"Insufficient stock for product {product_id}: available {available}, requested {requested}"
        )
        self.product_id = product_id
        self.available = available
        self.requested = requested
