from datetime import date, datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


MovementType = Literal["IN", "OUT"]
StockStatus = Literal["Out of Stock", "Low Stock", "In Stock"]


class InventoryLineCreate(BaseModel):
    product_id: UUID
    color: str

    @field_validator("color")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v


class InventoryLineRead(BaseModel):
    id: UUID
    product_id: UUID
    color: str
    quantity: int
    created_at: datetime


class StockRow(InventoryLineRead):
    sku: str
    product_name: str
    status: StockStatus


class StockSummary(BaseModel):
    total_products: int
    total_variants: int
    total_stock: int
    low_stock_items: int


class StockMovementCreate(BaseModel):
    inventory_id: UUID
    quantity: int = Field(gt=0, strict=True)
    movement_type: MovementType
    notes: Optional[str] = None

    @field_validator("movement_type", mode="before")
    @classmethod
    def _upper_type(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("notes")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class StockMovementBatchCreate(BaseModel):
    movements: List[StockMovementCreate] = Field(min_length=1)


class StockMovementRead(BaseModel):
    id: UUID
    inventory_id: UUID
    quantity: int
    movement_type: MovementType
    notes: Optional[str] = None
    movement_date: datetime
    created_at: datetime
    created_by_user_id: Optional[UUID] = None


class MovementRow(StockMovementRead):
    product_id: UUID
    color: str
    sku: str
    product_name: str


class MovementStatsRead(BaseModel):
    total_in: int
    total_out: int
    net_change: int
    total_transactions: int
    top_product: Optional[str] = None
    avg_transaction_size: float


class MovementFiltersRead(BaseModel):
    movement_type: Literal["all", "IN", "OUT"]
    product_id: str
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    notes: str
    page: int
    limit: int
    is_active: bool


class MovementPageRead(BaseModel):
    rows: List[MovementRow]
    total_count: int
    page: int
    limit: int
    total_pages: int
    stats: MovementStatsRead
    filters: MovementFiltersRead
