"""
Stock reconciliation: the only code path that changes InventoryLine.quantity.

Every quantity change is written together with its StockMovement row in one
transaction, and an OUT movement is refused when it would take the line
below zero.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence
from uuid import UUID

from core.errors import (
    BatchAbortedError,
    InsufficientStockError,
    InventoryError,
    InventoryLineNotFoundError,
    MovementValidationError,
)
from core.events import INVENTORY_CHANGED, MOVEMENTS_CHANGED, EventBus, event_bus
from db.access import DataAccess
from db.database import utcnow
from db.inventory.line import InventoryLine
from db.inventory.movement import StockMovement

logger = logging.getLogger(__name__)

MOVEMENT_TYPES = ("IN", "OUT")


@dataclass(frozen=True)
class MovementRequest:
    inventory_id: UUID
    quantity: int
    movement_type: str
    notes: Optional[str] = None


def _normalize(quantity, movement_type, notes):
    # bool is an int subclass; True must not count as quantity 1
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise MovementValidationError("quantity must be a whole number")
    if quantity <= 0:
        raise MovementValidationError("quantity must be > 0")
    mtype = (movement_type or "").strip().upper()
    if mtype not in MOVEMENT_TYPES:
        raise MovementValidationError("movement_type must be IN or OUT")
    if notes is not None:
        notes = notes.strip() or None
    return quantity, mtype, notes


class ReconciliationService:
    def __init__(
        self,
        access: DataAccess,
        bus: EventBus = event_bus,
        clock: Callable[[], object] = utcnow,
    ):
        self.access = access
        self.bus = bus
        self.clock = clock

    async def apply_movement(
        self,
        inventory_id: UUID,
        quantity: int,
        movement_type: str,
        notes: Optional[str] = None,
        user_id: Optional[UUID] = None,
    ) -> Dict:
        """Apply one IN/OUT movement and return the stored movement row."""
        quantity, mtype, notes = _normalize(quantity, movement_type, notes)
        delta = quantity if mtype == "IN" else -quantity

        new_quantity = await self.access.adjust_quantity(inventory_id, delta)
        if new_quantity is None:
            line = await self.access.get(InventoryLine.__table__, inventory_id)
            await self.access.rollback()
            if line is None:
                logger.warning("movement rejected: unknown line", extra={"inventory_id": inventory_id})
                raise InventoryLineNotFoundError(inventory_id)
            logger.warning(
                "movement rejected: insufficient stock",
                extra={"inventory_id": inventory_id, "available": line["quantity"], "requested": quantity},
            )
            raise InsufficientStockError(inventory_id, int(line["quantity"]), quantity)

        movement = await self.access.insert(
            StockMovement.__table__,
            {
                "inventory_id": inventory_id,
                "quantity": quantity,
                "movement_type": mtype,
                "notes": notes,
                "movement_date": self.clock(),
                "created_by_user_id": user_id,
            },
        )
        await self.access.commit()

        logger.info(
            "stock %s applied",
            mtype,
            extra={"inventory_id": inventory_id, "quantity": quantity, "new_quantity": new_quantity},
        )
        self.bus.publish(INVENTORY_CHANGED, inventory_id=inventory_id)
        self.bus.publish(MOVEMENTS_CHANGED, inventory_id=inventory_id)
        return movement

    async def apply_batch(
        self,
        requests: Sequence[MovementRequest],
        user_id: Optional[UUID] = None,
    ) -> List[Dict]:
        """
        Apply movements in order, each in its own transaction.

        Stops at the first failure and raises BatchAbortedError; movements
        applied before it are kept.
        """
        if not requests:
            raise MovementValidationError("batch must contain at least one movement")

        applied: List[Dict] = []
        for index, req in enumerate(requests):
            try:
                movement = await self.apply_movement(
                    req.inventory_id,
                    req.quantity,
                    req.movement_type,
                    req.notes,
                    user_id=user_id,
                )
            except InventoryError as e:
                logger.warning(
                    "batch aborted",
                    extra={"failed_index": index, "applied": len(applied), "code": e.code},
                )
                raise BatchAbortedError(index, e, applied) from e
            applied.append(movement)
        return applied
