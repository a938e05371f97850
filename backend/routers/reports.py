from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from core.auth import current_active_user
from core.errors import InventoryError
from db.access import DataAccess
from db.users import User
from routers.common import get_access, to_http_exception
from routers.inventory import load_stock_table
from schemas.reports import StockReport
from services.statistics import stock_report, stock_status

router = APIRouter()


@router.get("/stock", response_model=StockReport)
async def get_stock_report(
    product_id: Optional[UUID] = None,
    min_quantity: Optional[int] = Query(None, ge=0),
    max_quantity: Optional[int] = Query(None, ge=0),
    sort_by: Literal["quantity", "name"] = "quantity",
    access: DataAccess = Depends(get_access),
    user: User = Depends(current_active_user),
):
    """
    Reports panel: stock per colour as chart series and per-product totals.

    Chart rendering is left to the client; only the data is returned.
    """
    try:
        lines = await load_stock_table(access)
    except InventoryError as e:
        raise to_http_exception(e)

    report = stock_report(
        lines,
        product_id=product_id,
        min_quantity=min_quantity,
        max_quantity=max_quantity,
        sort_by=sort_by,
    )
    report["lines"] = [dict(line, status=stock_status(int(line["quantity"]))) for line in report["lines"]]
    return report
