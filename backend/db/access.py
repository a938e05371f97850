"""
Generic read/write operations against the stock tables.

Services never build sessions or statements themselves beyond filter
expressions; they call ``select`` / ``insert`` / ``update`` here with a table
(or join), and get plain dicts back.  Driver and SQL failures surface as
``StoreUnavailableError`` (or ``DuplicateError`` for unique violations) after
the session has been rolled back.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import func, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import DuplicateError, StoreUnavailableError
from db.models import InventoryLine

logger = logging.getLogger(__name__)


class DataAccess:
    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def _guard(self, op: str):
        try:
            yield
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning("%s rejected by constraint", op, extra={"error": e.orig})
            raise DuplicateError(f"{op} conflicts with an existing row") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("%s failed", op, exc_info=True)
            raise StoreUnavailableError(f"Store operation '{op}' failed: {e}") from e

    async def select(
        self,
        table,
        columns: Optional[Sequence[Any]] = None,
        filters: Iterable[Any] = (),
        order: Sequence[Any] = (),
        range_: Optional[Tuple[int, int]] = None,
        count: bool = False,
    ) -> Tuple[List[Dict[str, Any]], Optional[int]]:
        """
        Run a filtered, ordered, optionally paginated read.

        - table: a Table or a join of tables.
        - columns: explicit (labelled) columns; defaults to every column of ``table``.
        - range_: (offset, limit).
        - count: also return the unpaginated row count.
        """
        stmt = select(*(columns if columns is not None else [table])).select_from(table)
        for clause in filters:
            stmt = stmt.where(clause)

        async with self._guard("select"):
            total = None
            if count:
                count_stmt = select(func.count()).select_from(stmt.subquery())
                total = int((await self.session.execute(count_stmt)).scalar_one())

            if order:
                stmt = stmt.order_by(*order)
            if range_ is not None:
                offset, limit = range_
                stmt = stmt.offset(offset).limit(limit)

            res = await self.session.execute(stmt)
            rows = [dict(r) for r in res.mappings().all()]
        return rows, total

    async def get(self, table, row_id) -> Optional[Dict[str, Any]]:
        rows, _ = await self.select(table, filters=[table.c.id == row_id])
        return rows[0] if rows else None

    async def insert(self, table, fields: Dict[str, Any]) -> Dict[str, Any]:
        stmt = insert(table).values(**fields).returning(*table.c)
        async with self._guard(f"insert {table.name}"):
            res = await self.session.execute(stmt)
            return dict(res.mappings().one())

    async def update(self, table, fields: Dict[str, Any], match_id) -> int:
        stmt = update(table).where(table.c.id == match_id).values(**fields)
        async with self._guard(f"update {table.name}"):
            res = await self.session.execute(stmt)
            return int(res.rowcount or 0)

    async def adjust_quantity(self, line_id, delta: int) -> Optional[int]:
        """
        Add ``delta`` to an inventory line only if the result stays >= 0.

        Check and write are one statement, so two concurrent OUT movements
        cannot both pass the check. Returns the new quantity, or None when no
        row matched (unknown line or not enough stock).
        """
        tbl = InventoryLine.__table__
        stmt = (
            update(tbl)
            .where(tbl.c.id == line_id)
            .where(tbl.c.quantity + delta >= 0)
            .values(quantity=tbl.c.quantity + delta)
            .returning(tbl.c.quantity)
        )
        async with self._guard("adjust inventory quantity"):
            row = (await self.session.execute(stmt)).first()
        return int(row.quantity) if row else None

    async def commit(self) -> None:
        async with self._guard("commit"):
            await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
