from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from restaurant_admin.models.purchase import PurchaseUnitEnum

CENT = Decimal("0.01")


class PurchaseItemIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)
    quantity: Decimal = Field(..., gt=0)
    unit: PurchaseUnitEnum = PurchaseUnitEnum.kg
    unit_price: Decimal = Field(..., gt=0)


class PurchaseItemRead(BaseModel):
    id: int
    name: str
    quantity: Decimal
    unit: PurchaseUnitEnum
    unit_price: Decimal
    total_price: Decimal

    class Config:
        from_attributes = True


class PurchaseCreate(BaseModel):
    # если не передан, генерируется INV-00001
    invoice_no: Optional[str] = Field(None, min_length=1, max_length=32)
    supplier_id: int
    payment_type: str = Field(..., min_length=1, max_length=32)
    purchase_date: date
    vat: Decimal = Field(Decimal("0"), ge=0)
    discount: Decimal = Field(Decimal("0"), ge=0)
    paid_amount: Decimal = Field(Decimal("0"), ge=0)
    items: List[PurchaseItemIn] = Field(..., min_length=1)


class PurchaseUpdate(BaseModel):
    invoice_no: Optional[str] = Field(None, min_length=1, max_length=32)
    supplier_id: Optional[int] = None
    payment_type: Optional[str] = Field(None, min_length=1, max_length=32)
    purchase_date: Optional[date] = None
    vat: Optional[Decimal] = Field(None, ge=0)
    discount: Optional[Decimal] = Field(None, ge=0)
    paid_amount: Optional[Decimal] = Field(None, ge=0)
    items: Optional[List[PurchaseItemIn]] = Field(None, min_length=1)

    class Config:
        extra = "forbid"


class PurchaseRead(BaseModel):
    id: int
    invoice_no: str
    supplier_id: int
    supplier_name: Optional[str] = None
    payment_type: str
    purchase_date: date
    vat: Decimal
    discount: Decimal
    paid_amount: Decimal
    total_price: Decimal
    total_amount: Decimal
    due_amount: Decimal
    items: List[PurchaseItemRead] = []
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_orm_with_totals(cls, purchase):
        return cls(
            id=purchase.id,
            invoice_no=purchase.invoice_no,
            supplier_id=purchase.supplier_id,
            supplier_name=purchase.supplier.name if purchase.supplier else None,
            payment_type=purchase.payment_type,
            purchase_date=purchase.purchase_date,
            vat=purchase.vat,
            discount=purchase.discount,
            paid_amount=purchase.paid_amount,
            total_price=Decimal(purchase.total_price).quantize(CENT),
            total_amount=Decimal(purchase.total_amount).quantize(CENT),
            due_amount=Decimal(purchase.due_amount).quantize(CENT),
            items=[PurchaseItemRead.model_validate(i) for i in purchase.items],
            created_at=purchase.created_at,
            updated_at=purchase.updated_at,
        )
