from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.crud import dashboard as crud
from restaurant_admin.db.session import get_async_session
from restaurant_admin.schemas.dashboard import DashboardOverview, DashboardSummary, OverviewPeriod
from restaurant_admin.schemas.order import OrderRead

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=DashboardSummary)
async def summary(db: AsyncSession = Depends(get_async_session)):
    data = await crud.get_summary(db)
    data["recent_orders"] = [OrderRead.from_orm_with_name(o) for o in data["recent_orders"]]
    return data


@router.get("/overview", response_model=DashboardOverview)
async def overview(
    period: OverviewPeriod = Query(OverviewPeriod.day, description="day | week | month"),
    count: Optional[int] = Query(None, ge=1, le=60, description="Количество интервалов"),
    db: AsyncSession = Depends(get_async_session),
):
    return await crud.get_overview(db, period=period, count=count)
