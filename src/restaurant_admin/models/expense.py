from decimal import Decimal

from sqlalchemy import Column, Integer, String, Numeric, Boolean, Date, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from ..db.base import Base, utcnow


class ExpenseType(Base):
    __tablename__ = "expense_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(64), nullable=False, unique=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    expenses = relationship("Expense", back_populates="expense_type")


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    expense_no = Column(String(32), nullable=True, unique=True)
    expense_type_id = Column(Integer, ForeignKey("expense_types.id"), nullable=False)
    name = Column(String(128), nullable=False)
    supplier = Column(String(128), nullable=True)
    quantity = Column(Numeric(12, 3), nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_discount = Column(Numeric(10, 2), nullable=False, default=0)
    paid_amount = Column(Numeric(10, 2), nullable=False, default=0)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    expense_type = relationship("ExpenseType", back_populates="expenses")

    @property
    def total_price(self) -> Decimal:
        gross = Decimal(self.quantity) * Decimal(self.unit_price)
        return (gross - Decimal(self.total_discount or 0)).quantize(Decimal("0.01"))
