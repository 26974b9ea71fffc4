from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TableCreate(BaseModel):
    table_no: str = Field(..., min_length=1, max_length=16)
    capacity: int = Field(..., ge=1)
    is_active: bool = True


class TableUpdate(BaseModel):
    table_no: Optional[str] = Field(None, min_length=1, max_length=16)
    capacity: Optional[int] = Field(None, ge=1)

    class Config:
        extra = "forbid"


class TableRead(BaseModel):
    id: int
    table_no: str
    capacity: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
