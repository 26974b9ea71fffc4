from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from ..db.base import Base, utcnow


class Supplier(Base):
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), nullable=False)
    number = Column(String(32), nullable=False)  # телефон
    email = Column(String(128), nullable=False)
    address = Column(String(256), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    purchases = relationship("Purchase", back_populates="supplier")
