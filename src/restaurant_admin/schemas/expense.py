from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class ExpenseTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)
    is_active: bool = True


class ExpenseTypeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=64)

    class Config:
        extra = "forbid"


class ExpenseTypeRead(BaseModel):
    id: int
    name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ExpenseCreate(BaseModel):
    # если не передан, генерируется EXP-00001
    expense_no: Optional[str] = Field(None, min_length=1, max_length=32)
    expense_type_id: int
    name: str = Field(..., min_length=1, max_length=128)
    supplier: Optional[str] = Field(None, max_length=128)
    quantity: Decimal = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)
    total_discount: Decimal = Field(Decimal("0"), ge=0)
    paid_amount: Decimal = Field(Decimal("0"), ge=0)
    date: date


class ExpenseUpdate(BaseModel):
    expense_type_id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1, max_length=128)
    supplier: Optional[str] = Field(None, max_length=128)
    quantity: Optional[Decimal] = Field(None, gt=0)
    unit_price: Optional[Decimal] = Field(None, ge=0)
    total_discount: Optional[Decimal] = Field(None, ge=0)
    paid_amount: Optional[Decimal] = Field(None, ge=0)
    date: Optional[date] = None

    class Config:
        extra = "forbid"


class ExpenseRead(BaseModel):
    id: int
    expense_no: str
    expense_type_id: int
    expense_type: Optional[str] = None
    name: str
    supplier: Optional[str] = None
    quantity: Decimal
    unit_price: Decimal
    total_discount: Decimal
    total_price: Decimal
    paid_amount: Decimal
    date: date
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_orm_with_type(cls, expense):
        return cls(
            id=expense.id,
            expense_no=expense.expense_no,
            expense_type_id=expense.expense_type_id,
            expense_type=expense.expense_type.name if expense.expense_type else None,
            name=expense.name,
            supplier=expense.supplier,
            quantity=expense.quantity,
            unit_price=expense.unit_price,
            total_discount=expense.total_discount,
            total_price=expense.total_price,
            paid_amount=expense.paid_amount,
            date=expense.date,
            created_at=expense.created_at,
            updated_at=expense.updated_at,
        )
