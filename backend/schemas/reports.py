from typing import List, Optional

from pydantic import BaseModel

from schemas.inventory import StockRow


class ChartPoint(BaseModel):
    name: str
    quantity: int
    sku: Optional[str] = None


class ProductTotal(BaseModel):
    name: str
    quantity: int


class StockReportStats(BaseModel):
    total_items: int
    total_quantity: int
    low_stock_items: int
    out_of_stock_items: int


class StockReport(BaseModel):
    lines: List[StockRow]
    chart: List[ChartPoint]
    by_product: List[ProductTotal]
    stats: StockReportStats
