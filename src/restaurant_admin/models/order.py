import enum
from sqlalchemy import Column, Integer, Numeric, DateTime, ForeignKey, Enum as SAEnum, func
from sqlalchemy.orm import relationship
from ..db.base import Base, utcnow


class OrderStatusEnum(str, enum.Enum):
    receive = "Receive"
    preparing = "Preparing"
    ready = "Ready"
    served = "Served"


class OrderTypeEnum(str, enum.Enum):
    dine_in = "dine_in"
    takeaway = "takeaway"
    delivery = "delivery"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    table_id = Column(Integer, ForeignKey("dining_tables.id"), nullable=True)
    order_type = Column(SAEnum(OrderTypeEnum, name="order_type"), nullable=False, default=OrderTypeEnum.dine_in)
    # производный от статусов позиций, хранится для фильтрации
    status = Column(SAEnum(OrderStatusEnum, name="order_status"), nullable=False, default=OrderStatusEnum.receive)
    tax = Column(Numeric(10, 2), nullable=False, default=0)
    discount = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    closed_at = Column(DateTime(timezone=True), nullable=True)

    # связи
    table = relationship("DiningTable", back_populates="orders")
    items = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.id"
    )
