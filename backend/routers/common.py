from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import (
    BatchAbortedError,
    DuplicateError,
    InsufficientStockError,
    InvalidInputError,
    InventoryError,
    NotFoundError,
    StoreUnavailableError,
)
from db.access import DataAccess
from db.database import get_async_session


async def get_access(db: AsyncSession = Depends(get_async_session)) -> DataAccess:
    return DataAccess(db)


def _status_for(e: InventoryError) -> int:
    if isinstance(e, InvalidInputError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(e, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(e, (InsufficientStockError, DuplicateError)):
        return status.HTTP_409_CONFLICT
    if isinstance(e, StoreUnavailableError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(e: InventoryError) -> HTTPException:
    if isinstance(e, BatchAbortedError):
        return HTTPException(
            status_code=_status_for(e.cause),
            detail={
                "message": str(e.cause),
                "code": e.cause.code,
                "failed_index": e.index,
                "applied": [str(m["id"]) for m in e.applied],
            },
        )
    return HTTPException(status_code=_status_for(e), detail=str(e))
