from typing import List

from fastapi import APIRouter, Depends, status

from core.auth import current_active_user
from core.errors import InventoryError
from db.access import DataAccess
from db.users import User
from routers.common import get_access, to_http_exception
from schemas.products import ProductCreate, ProductRead
from services import catalog
from services.views import PRODUCT_LIST, view_cache

router = APIRouter()


@router.get("/", response_model=List[ProductRead])
async def list_products(
    access: DataAccess = Depends(get_access),
    user: User = Depends(current_active_user),
):
    try:
        rows = await view_cache.get(PRODUCT_LIST, lambda: catalog.list_products(access))
    except InventoryError as e:
        raise to_http_exception(e)
    return [ProductRead(**r) for r in rows]


@router.post("/", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate,
    access: DataAccess = Depends(get_access),
    user: User = Depends(current_active_user),
):
    try:
        row = await catalog.create_product(access, payload.sku, payload.name)
    except InventoryError as e:
        raise to_http_exception(e)
    return ProductRead(**row)
