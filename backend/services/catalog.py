"""Products and colour variants (inventory lines)."""

import logging
from typing import Any, Dict, List
from uuid import UUID

from sqlalchemy import func

from core.errors import DuplicateError, InvalidInputError, ProductNotFoundError
from core.events import INVENTORY_CHANGED, PRODUCTS_CHANGED, EventBus, event_bus
from db.access import DataAccess
from db.inventory.line import InventoryLine
from db.product import Product

logger = logging.getLogger(__name__)

_products = Product.__table__
_lines = InventoryLine.__table__

_LINE_COLUMNS = [
    _lines.c.id,
    _lines.c.product_id,
    _lines.c.color,
    _lines.c.quantity,
    _lines.c.created_at,
    _products.c.sku,
    _products.c.name.label("product_name"),
]


def _required(value: str, field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise InvalidInputError(f"{field} is required")
    return value


async def list_products(access: DataAccess) -> List[Dict[str, Any]]:
    rows, _ = await access.select(_products, order=[func.lower(_products.c.name).asc()])
    return rows


async def create_product(access: DataAccess, sku: str, name: str, bus: EventBus = event_bus) -> Dict[str, Any]:
    sku = _required(sku, "sku").upper()
    name = _required(name, "name")

    existing, _ = await access.select(_products, filters=[_products.c.sku == sku])
    if existing:
        raise DuplicateError(f"Product with SKU {sku} already exists")

    row = await access.insert(_products, {"sku": sku, "name": name})
    await access.commit()
    logger.info("product created", extra={"product_id": row["id"], "sku": sku})
    bus.publish(PRODUCTS_CHANGED, product_id=row["id"])
    return row


async def list_lines(access: DataAccess) -> List[Dict[str, Any]]:
    """Every inventory line with its product, newest first."""
    rows, _ = await access.select(
        _lines.join(_products, _lines.c.product_id == _products.c.id),
        columns=_LINE_COLUMNS,
        order=[_lines.c.created_at.desc(), _lines.c.id.desc()],
    )
    return rows


async def add_color(access: DataAccess, product_id: UUID, color: str, bus: EventBus = event_bus) -> Dict[str, Any]:
    """Create an empty (quantity 0) inventory line for a product colour."""
    color = _required(color, "color")

    if await access.get(_products, product_id) is None:
        raise ProductNotFoundError(product_id)

    existing, _ = await access.select(
        _lines,
        filters=[_lines.c.product_id == product_id, func.lower(_lines.c.color) == color.lower()],
    )
    if existing:
        raise DuplicateError(f"Color '{color}' already exists for this product")

    row = await access.insert(_lines, {"product_id": product_id, "color": color, "quantity": 0})
    await access.commit()
    logger.info("inventory line created", extra={"inventory_id": row["id"], "product_id": product_id})
    bus.publish(INVENTORY_CHANGED, inventory_id=row["id"])
    return row
