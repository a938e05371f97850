import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import relationship

from ..database import Base, utcnow


class StockMovement(Base):
    __tablename__ = "stock_movements"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_stock_movements_quantity_positive"),
        CheckConstraint("movement_type IN ('IN', 'OUT')", name="ck_stock_movements_type"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    inventory_id = Column(
        Uuid,
        ForeignKey("inventory.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    quantity = Column(Integer, nullable=False)
    movement_type = Column(Text, nullable=False, index=True)  # 'IN' | 'OUT'
    notes = Column(Text, nullable=True)

    movement_date = Column(DateTime, nullable=False, default=utcnow, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    created_by_user_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    inventory_line = relationship("InventoryLine", back_populates="movements")
    created_by_user = relationship("User", back_populates="movements")
