from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class MenuItemSizeIn(BaseModel):
    size: str = Field(..., min_length=1, max_length=32)
    regular_price: Decimal = Field(..., gt=0)
    offer_price: Optional[Decimal] = Field(None, gt=0)


class MenuItemIngredientIn(BaseModel):
    inventory_item_id: int
    consumption_qty: Decimal = Field(..., gt=0)


class MenuItemExtraIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)
    price: Decimal = Field(..., ge=0)


class MenuItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    category_id: int
    sub_category_id: Optional[int] = None
    description: Optional[str] = None
    image: Optional[str] = None
    cooking_time: Optional[str] = None
    is_active: bool = True
    sizes: List[MenuItemSizeIn] = Field(..., min_length=1)
    ingredients: List[MenuItemIngredientIn] = []
    extras: List[MenuItemExtraIn] = []


class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=128)
    category_id: Optional[int] = None
    sub_category_id: Optional[int] = None
    description: Optional[str] = None
    image: Optional[str] = None
    cooking_time: Optional[str] = None
    # списки заменяются целиком
    sizes: Optional[List[MenuItemSizeIn]] = Field(None, min_length=1)
    ingredients: Optional[List[MenuItemIngredientIn]] = None
    extras: Optional[List[MenuItemExtraIn]] = None

    class Config:
        extra = "forbid"


class MenuItemSizeRead(BaseModel):
    id: int
    size: str
    regular_price: Decimal
    offer_price: Optional[Decimal] = None

    class Config:
        from_attributes = True


class MenuItemIngredientRead(BaseModel):
    id: int
    inventory_item_id: int
    name: Optional[str] = None
    consumption_qty: Decimal


class MenuItemExtraRead(BaseModel):
    id: int
    name: str
    price: Decimal

    class Config:
        from_attributes = True


class MenuItemRead(BaseModel):
    id: int
    name: str
    category_id: int
    category_name: Optional[str] = None
    sub_category_id: Optional[int] = None
    sub_category_name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    cooking_time: Optional[str] = None
    is_active: bool
    sizes: List[MenuItemSizeRead] = []
    ingredients: List[MenuItemIngredientRead] = []
    extras: List[MenuItemExtraRead] = []
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_orm_with_names(cls, item):
        return cls(
            id=item.id,
            name=item.name,
            category_id=item.category_id,
            category_name=item.category.name if item.category else None,
            sub_category_id=item.sub_category_id,
            sub_category_name=item.sub_category.name if item.sub_category else None,
            description=item.description,
            image=item.image,
            cooking_time=item.cooking_time,
            is_active=item.is_active,
            sizes=[MenuItemSizeRead.model_validate(s) for s in item.sizes],
            ingredients=[
                MenuItemIngredientRead(
                    id=i.id,
                    inventory_item_id=i.inventory_item_id,
                    name=i.inventory_item.name if i.inventory_item else None,
                    consumption_qty=i.consumption_qty,
                )
                for i in item.ingredients
            ],
            extras=[MenuItemExtraRead.model_validate(e) for e in item.extras],
            created_at=item.created_at,
            updated_at=item.updated_at,
        )
