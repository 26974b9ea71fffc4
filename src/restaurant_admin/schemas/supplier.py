from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from restaurant_admin.schemas.purchase import CENT, PurchaseItemRead

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class SupplierCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    number: str = Field(..., min_length=1, max_length=32)
    email: str = Field(..., max_length=128, pattern=EMAIL_PATTERN)
    address: Optional[str] = Field(None, max_length=256)


class SupplierUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=128)
    number: Optional[str] = Field(None, min_length=1, max_length=32)
    email: Optional[str] = Field(None, max_length=128, pattern=EMAIL_PATTERN)
    address: Optional[str] = Field(None, max_length=256)

    class Config:
        extra = "forbid"


class SupplierRead(BaseModel):
    id: int
    name: str
    number: str
    email: str
    address: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BillRead(BaseModel):
    """Закупка глазами поставщика."""

    bill_id: str
    purchase_id: int
    supplier_id: int
    supplier: str
    total_amount: Decimal
    paid: Decimal
    due: Decimal
    payment_method: str
    date: date
    items: List[PurchaseItemRead] = []

    @classmethod
    def from_purchase(cls, purchase):
        return cls(
            bill_id=purchase.invoice_no,
            purchase_id=purchase.id,
            supplier_id=purchase.supplier_id,
            supplier=purchase.supplier.name,
            total_amount=Decimal(purchase.total_amount).quantize(CENT),
            paid=Decimal(purchase.paid_amount).quantize(CENT),
            due=Decimal(purchase.due_amount).quantize(CENT),
            payment_method=purchase.payment_type,
            date=purchase.purchase_date,
            items=[PurchaseItemRead.model_validate(i) for i in purchase.items],
        )


class BillPayment(BaseModel):
    amount: Decimal = Field(..., gt=0)
    payment_method: str = Field(..., min_length=1, max_length=32)


class SupplierStats(BaseModel):
    total_suppliers: int
    total_bills: int
    total_purchases: Decimal
    total_amount: Decimal
    total_paid: Decimal
    total_due: Decimal
