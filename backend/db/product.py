import uuid
from sqlalchemy import Column, DateTime, String, Uuid
from sqlalchemy.orm import relationship

from .database import Base, utcnow


class Product(Base):
    """Catalogue entry. Created once, never updated or deleted."""
    __tablename__ = "products"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    sku = Column(String, nullable=False, unique=True, index=True)  # stored upper-case
    name = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    lines = relationship("InventoryLine", back_populates="product")

