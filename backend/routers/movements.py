from dataclasses import asdict
from datetime import date
from typing import List, Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from core.auth import current_active_user
from core.config import settings
from core.errors import InventoryError
from db.access import DataAccess
from db.users import User
from routers.common import get_access, to_http_exception
from schemas.inventory import (
    MovementFiltersRead,
    MovementPageRead,
    MovementRow,
    MovementStatsRead,
    StockMovementBatchCreate,
    StockMovementCreate,
    StockMovementRead,
)
from services.movement_query import ALL, MovementFilters, list_movements, recent_movements
from services.reconciliation import MovementRequest, ReconciliationService
from services.statistics import movement_stats
from services.views import HISTORY, view_cache

router = APIRouter()


@router.post("/", response_model=StockMovementRead, status_code=status.HTTP_201_CREATED)
async def create_movement(
    payload: StockMovementCreate,
    access: DataAccess = Depends(get_access),
    user: User = Depends(current_active_user),
):
    service = ReconciliationService(access)
    try:
        movement = await service.apply_movement(
            payload.inventory_id,
            payload.quantity,
            payload.movement_type,
            payload.notes,
            user_id=user.id,
        )
    except InventoryError as e:
        raise to_http_exception(e)
    return StockMovementRead(**movement)


@router.post("/batch", response_model=List[StockMovementRead], status_code=status.HTTP_201_CREATED)
async def create_movement_batch(
    payload: StockMovementBatchCreate,
    access: DataAccess = Depends(get_access),
    user: User = Depends(current_active_user),
):
    """
    Record several movements (the multi-select IN/OUT form).

    Applied in order; the first failure stops the batch and earlier movements
    stay recorded. The error detail lists the ids that were applied.
    """
    service = ReconciliationService(access)
    requests = [
        MovementRequest(m.inventory_id, m.quantity, m.movement_type, m.notes)
        for m in payload.movements
    ]
    try:
        movements = await service.apply_batch(requests, user_id=user.id)
    except InventoryError as e:
        raise to_http_exception(e)
    return [StockMovementRead(**m) for m in movements]


@router.get("/", response_model=MovementPageRead)
async def analyse_movements(
    movement_type: Literal["all", "IN", "OUT"] = ALL,
    product_id: str = ALL,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    notes: str = "",
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=1000),
    access: DataAccess = Depends(get_access),
    user: User = Depends(current_active_user),
):
    """Analysis panel: filtered, paginated movements plus stats for the rows returned."""
    if product_id != ALL:
        try:
            product_id = UUID(product_id)
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="product_id must be a UUID or 'all'")

    try:
        filters = MovementFilters(
            movement_type=movement_type,
            product_id=product_id,
            date_from=date_from,
            date_to=date_to,
            notes=notes,
            page=page,
            limit=limit,
        )
        result = await list_movements(access, filters)
    except InventoryError as e:
        raise to_http_exception(e)

    return MovementPageRead(
        rows=[MovementRow(**r) for r in result.rows],
        total_count=result.total_count,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
        stats=MovementStatsRead(**asdict(movement_stats(result.rows))),
        filters=MovementFiltersRead(
            movement_type=filters.movement_type,
            product_id=str(filters.product_id),
            date_from=filters.date_from,
            date_to=filters.date_to,
            notes=filters.notes,
            page=filters.page,
            limit=filters.limit,
            is_active=filters.is_active,
        ),
    )


@router.get("/history", response_model=List[MovementRow])
async def movement_history(
    limit: int = Query(settings.history_limit, ge=1, le=1000),
    access: DataAccess = Depends(get_access),
    user: User = Depends(current_active_user),
):
    try:
        if limit == settings.history_limit:
            rows = await view_cache.get(HISTORY, lambda: recent_movements(access, limit))
        else:
            rows = await recent_movements(access, limit)
    except InventoryError as e:
        raise to_http_exception(e)
    return [MovementRow(**r) for r in rows]
