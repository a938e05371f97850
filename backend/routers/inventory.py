from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, status

from core.auth import current_active_user
from core.errors import InventoryError
from db.access import DataAccess
from db.users import User
from routers.common import get_access, to_http_exception
from schemas.inventory import InventoryLineCreate, InventoryLineRead, StockRow, StockSummary
from services import catalog
from services.statistics import inventory_summary, search_lines, stock_status
from services.views import PRODUCT_LIST, STOCK_SUMMARY, STOCK_TABLE, view_cache

router = APIRouter()


def _stock_row(line: Dict) -> StockRow:
    return StockRow(**line, status=stock_status(int(line["quantity"])))


async def load_stock_table(access: DataAccess) -> List[Dict]:
    return await view_cache.get(STOCK_TABLE, lambda: catalog.list_lines(access))


@router.get("/", response_model=List[StockRow])
async def get_stock(
    q: Optional[str] = None,
    access: DataAccess = Depends(get_access),
    user: User = Depends(current_active_user),
):
    """
    Stock table: every product colour with its quantity and status.

    - q optionally narrows to lines whose SKU, product name or colour contains it.
    """
    try:
        lines = await load_stock_table(access)
    except InventoryError as e:
        raise to_http_exception(e)
    return [_stock_row(line) for line in search_lines(lines, q)]


@router.get("/summary", response_model=StockSummary)
async def get_stock_summary(
    access: DataAccess = Depends(get_access),
    user: User = Depends(current_active_user),
):
    async def _load():
        products = await view_cache.get(PRODUCT_LIST, lambda: catalog.list_products(access))
        lines = await load_stock_table(access)
        return inventory_summary(products, lines)

    try:
        summary = await view_cache.get(STOCK_SUMMARY, _load)
    except InventoryError as e:
        raise to_http_exception(e)
    return StockSummary(**summary)


@router.post("/", response_model=InventoryLineRead, status_code=status.HTTP_201_CREATED)
async def add_color(
    payload: InventoryLineCreate,
    access: DataAccess = Depends(get_access),
    user: User = Depends(current_active_user),
):
    try:
        row = await catalog.add_color(access, payload.product_id, payload.color)
    except InventoryError as e:
        raise to_http_exception(e)
    return InventoryLineRead(**row)
