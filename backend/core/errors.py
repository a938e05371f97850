"""
Typed errors raised by the data access layer and the inventory services.

Every class carries a ``code`` so routers can map errors to HTTP statuses
without parsing messages:

    InventoryError
    +-- InvalidInputError          VALIDATION
    |   +-- MovementValidationError
    +-- NotFoundError              NOT_FOUND
    |   +-- InventoryLineNotFoundError
    |   +-- ProductNotFoundError
    +-- InsufficientStockError     INSUFFICIENT_STOCK
    +-- DuplicateError             DUPLICATE
    +-- BatchAbortedError          BATCH_ABORTED
    +-- StoreUnavailableError      STORE_UNAVAILABLE
"""

from typing import List, Optional


class InventoryError(Exception):
    code: str = "INVENTORY_ERROR"


class InvalidInputError(InventoryError):
    """Rejected before any store call is made."""

    code: str = "VALIDATION"


class MovementValidationError(InvalidInputError):
    pass


class NotFoundError(InventoryError):
    code: str = "NOT_FOUND"


class InventoryLineNotFoundError(NotFoundError):
    def __init__(self, inventory_id):
        self.inventory_id = inventory_id
        super().__init__(f"Inventory line {inventory_id} not found")


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class InsufficientStockError(InventoryError):
    code: str = "INSUFFICIENT_STOCK"

    def __init__(self, inventory_id, available: int, requested: int):
        self.inventory_id = inventory_id
        self.available = available
        self.requested = requested
        super().__init__(f"Insufficient stock. Available={available} requested={requested}")


class DuplicateError(InventoryError):
    code: str = "DUPLICATE"


class BatchAbortedError(InventoryError):
    """A batch stopped at ``index``; movements in ``applied`` stay committed."""

    code: str = "BATCH_ABORTED"

    def __init__(self, index: int, cause: InventoryError, applied: Optional[List[dict]] = None):
        self.index = index
        self.cause = cause
        self.applied = list(applied or [])
        super().__init__(f"Batch aborted at item {index}: {cause}")


class StoreUnavailableError(InventoryError):
    code: str = "STORE_UNAVAILABLE"
