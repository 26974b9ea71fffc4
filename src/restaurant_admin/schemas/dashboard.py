import enum
from datetime import date
from decimal import Decimal
from typing import List

from pydantic import BaseModel

from restaurant_admin.schemas.order import OrderRead


class OverviewPeriod(str, enum.Enum):
    day = "day"
    week = "week"
    month = "month"


class TopItem(BaseModel):
    menu_item_id: int
    menu_item_name: str
    total_sold: int


class DashboardSummary(BaseModel):
    total_orders: int
    total_revenue: Decimal
    total_staff: int
    top_items: List[TopItem]
    recent_orders: List[OrderRead]


class OverviewBucket(BaseModel):
    start: date
    orders: int
    revenue: Decimal


class DashboardOverview(BaseModel):
    period: OverviewPeriod
    buckets: List[OverviewBucket]
