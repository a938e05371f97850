import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import relationship

from ..database import Base, utcnow


class InventoryLine(Base):
    __tablename__ = "inventory"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_inventory_quantity_non_negative"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    product_id = Column(
        Uuid,
        ForeignKey("products.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    color = Column(Text, nullable=False)

    # Running total of the movement ledger; only the reconciliation service writes it.
    quantity = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    product = relationship("Product", back_populates="lines")
    movements = relationship("StockMovement", back_populates="inventory_line")
