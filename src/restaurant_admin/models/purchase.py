import enum
from decimal import Decimal

from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey, Enum as SAEnum, func
from sqlalchemy.orm import relationship
from ..db.base import Base, utcnow


class PurchaseUnitEnum(str, enum.Enum):
    kg = "kg"
    gm = "gm"
    piece = "piece"
    ml = "ML"


class Purchase(Base):
    """Закупка у поставщика. Для поставщика это же: счёт (bill)."""

    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True, index=True)
    invoice_no = Column(String(32), nullable=True, unique=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False)
    payment_type = Column(String(32), nullable=False)
    purchase_date = Column(Date, nullable=False)
    vat = Column(Numeric(10, 2), nullable=False, default=0)
    discount = Column(Numeric(10, 2), nullable=False, default=0)
    paid_amount = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    supplier = relationship("Supplier", back_populates="purchases")
    items = relationship(
        "PurchaseItem", back_populates="purchase", cascade="all, delete-orphan", order_by="PurchaseItem.id"
    )

    @property
    def total_price(self) -> Decimal:
        return sum((item.total_price for item in self.items), Decimal("0"))

    @property
    def total_amount(self) -> Decimal:
        return self.total_price + (self.vat or Decimal("0")) - (self.discount or Decimal("0"))

    @property
    def due_amount(self) -> Decimal:
        return self.total_amount - (self.paid_amount or Decimal("0"))


class PurchaseItem(Base):
    __tablename__ = "purchase_items"

    id = Column(Integer, primary_key=True)
    purchase_id = Column(Integer, ForeignKey("purchases.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(64), nullable=False)  # название ингредиента
    quantity = Column(Numeric(12, 3), nullable=False)
    unit = Column(SAEnum(PurchaseUnitEnum, name="purchase_unit"), nullable=False, default=PurchaseUnitEnum.kg)
    unit_price = Column(Numeric(10, 2), nullable=False)

    purchase = relationship("Purchase", back_populates="items")

    @property
    def total_price(self) -> Decimal:
        return (Decimal(self.quantity) * Decimal(self.unit_price)).quantize(Decimal("0.01"))
