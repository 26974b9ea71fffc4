import enum
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class StockStatusEnum(str, enum.Enum):
    sufficient = "sufficient"
    low = "low"
    out_of_stock = "out-of-stock"


class StockFilter(str, enum.Enum):
    all = "all"
    sufficient = "sufficient"
    low = "low"
    out_of_stock = "out-of-stock"


def stock_status(quantity, low_threshold) -> StockStatusEnum:
    quantity = Decimal(quantity or 0)
    if quantity <= 0:
        return StockStatusEnum.out_of_stock
    if quantity <= Decimal(low_threshold or 0):
        return StockStatusEnum.low
    return StockStatusEnum.sufficient


class InventoryItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)
    unit: str = Field("kg", min_length=1, max_length=16)
    quantity: Decimal = Field(Decimal("0"), ge=0)
    low_threshold: Decimal = Field(Decimal("0"), ge=0)
    is_active: bool = True


class InventoryItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=64)
    unit: Optional[str] = Field(None, min_length=1, max_length=16)
    quantity: Optional[Decimal] = Field(None, ge=0)
    low_threshold: Optional[Decimal] = Field(None, ge=0)

    class Config:
        extra = "forbid"


class InventoryItemRead(BaseModel):
    id: int
    name: str
    unit: str
    quantity: Decimal
    low_threshold: Decimal
    stock_status: StockStatusEnum
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_orm_with_status(cls, item):
        return cls(
            id=item.id,
            name=item.name,
            unit=item.unit,
            quantity=item.quantity,
            low_threshold=item.low_threshold,
            stock_status=stock_status(item.quantity, item.low_threshold),
            is_active=item.is_active,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class InventoryStats(BaseModel):
    today_spend: Decimal
    monthly_spend: Decimal
