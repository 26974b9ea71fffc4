from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.api.deps import PageParams, page_params
from restaurant_admin.crud import report as crud
from restaurant_admin.db.session import get_async_session
from restaurant_admin.schemas.report import (
    CategorySalesReport,
    ExpenseReport,
    PurchaseReport,
    SalesReport,
    SupplierReport,
    TopSellingReport,
)

router = APIRouter(prefix="/reports", tags=["reports"])


class ReportFilters:
    def __init__(
        self,
        search: Optional[str] = Query(None),
        date_from: Optional[date] = Query(None, description="С (включительно)"),
        date_to: Optional[date] = Query(None, description="По (включительно)"),
        params: PageParams = Depends(page_params),
    ):
        if date_from and date_to and date_from > date_to:
            raise HTTPException(status_code=400, detail="date_from must not be after date_to")
        self.kwargs = dict(
            search=search, date_from=date_from, date_to=date_to, page=params.page, page_size=params.page_size
        )


@router.get("/sales", response_model=SalesReport)
async def sales(filters: ReportFilters = Depends(), db: AsyncSession = Depends(get_async_session)):
    return await crud.sales_report(db, **filters.kwargs)


@router.get("/purchases", response_model=PurchaseReport)
async def purchases(filters: ReportFilters = Depends(), db: AsyncSession = Depends(get_async_session)):
    return await crud.purchase_report(db, **filters.kwargs)


@router.get("/expenses", response_model=ExpenseReport)
async def expenses(filters: ReportFilters = Depends(), db: AsyncSession = Depends(get_async_session)):
    return await crud.expense_report(db, **filters.kwargs)


@router.get("/suppliers", response_model=SupplierReport)
async def suppliers(filters: ReportFilters = Depends(), db: AsyncSession = Depends(get_async_session)):
    return await crud.supplier_report(db, **filters.kwargs)


@router.get("/top-selling", response_model=TopSellingReport)
async def top_selling(filters: ReportFilters = Depends(), db: AsyncSession = Depends(get_async_session)):
    """Самые продаваемые блюда за период, поиск по названию."""
    return await crud.top_selling_report(db, **filters.kwargs)


@router.get("/sales-by-category", response_model=CategorySalesReport)
async def sales_by_category(filters: ReportFilters = Depends(), db: AsyncSession = Depends(get_async_session)):
    return await crud.sales_by_category_report(db, **filters.kwargs)
