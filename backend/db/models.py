"""Import every mapped class so Base.metadata and relationship() names resolve."""

from .users import User
from .product import Product
from .inventory.line import InventoryLine
from .inventory.movement import StockMovement

__all__ = ["User", "Product", "InventoryLine", "StockMovement"]
