from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, func
from ..db.base import Base, utcnow


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(64), nullable=False, unique=True)
    unit = Column(String(16), nullable=False, default="kg")
    quantity = Column(Numeric(12, 3), nullable=False, default=0)
    low_threshold = Column(Numeric(12, 3), nullable=False, default=0)  # на этом уровне и ниже статус "low"
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
