import enum
from typing import Generic, List, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ActiveFilter(str, enum.Enum):
    all = "all"
    active = "active"
    inactive = "inactive"
    # синонимы из старого интерфейса
    deactivate = "deactivate"
    deactivated = "deactivated"


class Page(BaseModel, Generic[T]):
    items: List[T]
    total: int
    page: int
    page_size: int
    total_pages: int


class ActiveToggle(BaseModel):
    is_active: bool
