from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)
    number: str = Field(..., min_length=1, max_length=32)
    image: Optional[str] = None
    is_active: bool = True


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=64)
    number: Optional[str] = Field(None, min_length=1, max_length=32)
    image: Optional[str] = None

    class Config:
        extra = "forbid"


class CategoryRead(BaseModel):
    id: int
    name: str
    number: str
    image: Optional[str] = None
    is_active: bool
    sub_categories_count: int = 0
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_orm_with_count(cls, category):
        return cls(
            id=category.id,
            name=category.name,
            number=category.number,
            image=category.image,
            is_active=category.is_active,
            sub_categories_count=len(category.sub_categories),
            created_at=category.created_at,
            updated_at=category.updated_at,
        )


class SubCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)
    number: str = Field(..., min_length=1, max_length=32)
    category_id: int
    is_active: bool = True


class SubCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=64)
    number: Optional[str] = Field(None, min_length=1, max_length=32)
    category_id: Optional[int] = None

    class Config:
        extra = "forbid"


class SubCategoryRead(BaseModel):
    id: int
    name: str
    number: str
    category_id: int
    category_name: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_orm_with_name(cls, sub):
        return cls(
            id=sub.id,
            name=sub.name,
            number=sub.number,
            category_id=sub.category_id,
            category_name=sub.category.name if sub.category else None,
            is_active=sub.is_active,
            created_at=sub.created_at,
            updated_at=sub.updated_at,
        )
