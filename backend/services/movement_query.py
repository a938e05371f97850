"""
Filtered, paginated reads of the movement ledger (analysis and history panels).
"""

import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from core.config import settings
from core.errors import InvalidInputError
from db.access import DataAccess
from db.inventory.line import InventoryLine
from db.inventory.movement import StockMovement
from db.product import Product

ALL = "all"

_movements = StockMovement.__table__
_lines = InventoryLine.__table__
_products = Product.__table__

_JOINED = _movements.join(_lines, _movements.c.inventory_id == _lines.c.id).join(
    _products, _lines.c.product_id == _products.c.id
)

_ROW_COLUMNS = [
    _movements.c.id,
    _movements.c.inventory_id,
    _movements.c.quantity,
    _movements.c.movement_type,
    _movements.c.notes,
    _movements.c.movement_date,
    _movements.c.created_at,
    _movements.c.created_by_user_id,
    _lines.c.product_id,
    _lines.c.color,
    _products.c.sku,
    _products.c.name.label("product_name"),
]

_ORDER = [_movements.c.movement_date.desc(), _movements.c.created_at.desc(), _movements.c.id.desc()]


@dataclass(frozen=True)
class MovementFilters:
    movement_type: str = ALL
    product_id: Union[str, UUID] = ALL
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    notes: str = ""
    page: int = 1
    limit: int = field(default_factory=lambda: settings.default_page_size)

    def __post_init__(self):
        if self.page < 1:
            raise InvalidInputError(f"page must be at least 1, got {self.page}")
        if self.limit < 1:
            raise InvalidInputError(f"limit must be at least 1, got {self.limit}")

    def changed(self, **updates: Any) -> "MovementFilters":
        """Return a copy with ``updates``; any change besides ``page`` goes back to page 1."""
        if any(key != "page" for key in updates):
            updates.setdefault("page", 1)
        return replace(self, **updates)

    def cleared(self) -> "MovementFilters":
        return MovementFilters(limit=self.limit)

    @property
    def is_active(self) -> bool:
        return (
            self.movement_type != ALL
            or self.product_id != ALL
            or self.date_from is not None
            or self.date_to is not None
            or bool(self.notes)
            or self.page != 1
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class MovementPage:
    rows: List[Dict[str, Any]]
    total_count: int
    page: int
    limit: int
    total_pages: int


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_conditions(filters: MovementFilters) -> List[Any]:
    conditions = []
    if filters.movement_type != ALL:
        conditions.append(_movements.c.movement_type == filters.movement_type)
    if filters.product_id != ALL:
        conditions.append(_lines.c.product_id == filters.product_id)
    if filters.date_from:
        conditions.append(_movements.c.movement_date >= datetime.combine(filters.date_from, time.min))
    if filters.date_to:
        # inclusive calendar day: everything before the next midnight
        end_excl = datetime.combine(filters.date_to, time.min) + timedelta(days=1)
        conditions.append(_movements.c.movement_date < end_excl)
    notes = (filters.notes or "").strip()
    if notes:
        conditions.append(_movements.c.notes.ilike(f"%{_escape_like(notes)}%", escape="\\"))
    return conditions


async def list_movements(access: DataAccess, filters: MovementFilters) -> MovementPage:
    rows, total = await access.select(
        _JOINED,
        columns=_ROW_COLUMNS,
        filters=build_conditions(filters),
        order=_ORDER,
        range_=(filters.offset, filters.limit),
        count=True,
    )
    return MovementPage(
        rows=rows,
        total_count=total,
        page=filters.page,
        limit=filters.limit,
        total_pages=math.ceil(total / filters.limit) if total else 0,
    )


async def recent_movements(access: DataAccess, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    rows, _ = await access.select(
        _JOINED,
        columns=_ROW_COLUMNS,
        order=_ORDER,
        range_=(0, limit or settings.history_limit),
    )
    return rows
