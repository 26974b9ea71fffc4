from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.api.deps import PageParams, page_params
from restaurant_admin.crud import supplier as crud
from restaurant_admin.crud.common import build_page
from restaurant_admin.db.session import get_async_session
from restaurant_admin.schemas.common import Page
from restaurant_admin.schemas.supplier import (
    BillPayment,
    BillRead,
    SupplierCreate,
    SupplierRead,
    SupplierStats,
    SupplierUpdate,
)

router = APIRouter(prefix="/suppliers", tags=["suppliers"])


@router.get("/", response_model=Page[SupplierRead])
async def list_suppliers(
    search: Optional[str] = Query(None, description="Имя, телефон или email"),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_session),
):
    suppliers, total = await crud.get_suppliers(db, search=search, page=params.page, page_size=params.page_size)
    return build_page(suppliers, total, params.page, params.page_size)


@router.get("/stats", response_model=SupplierStats)
async def supplier_stats(db: AsyncSession = Depends(get_async_session)):
    return await crud.get_supplier_stats(db)


@router.get("/bills/due", response_model=Page[BillRead])
async def list_due_bills(
    search: Optional[str] = Query(None, description="Номер счёта или поставщик"),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_session),
):
    bills, total = await crud.get_due_bills(db, search=search, page=params.page, page_size=params.page_size)
    return build_page([BillRead.from_purchase(b) for b in bills], total, params.page, params.page_size)


@router.post("/bills/{purchase_id}/payments", response_model=BillRead)
async def pay_bill(
    purchase_id: int,
    payment: BillPayment,
    db: AsyncSession = Depends(get_async_session),
):
    try:
        bill = await crud.pay_bill(db, purchase_id, payment.amount, payment.payment_method)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not bill:
        raise HTTPException(status_code=404, detail="Bill not found")
    return BillRead.from_purchase(bill)


@router.get("/{supplier_id}", response_model=SupplierRead)
async def get_supplier(supplier_id: int, db: AsyncSession = Depends(get_async_session)):
    supplier = await crud.get_supplier_by_id(db, supplier_id)
    if not supplier:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return supplier


@router.get("/{supplier_id}/bills", response_model=Page[BillRead])
async def list_supplier_bills(
    supplier_id: int,
    search: Optional[str] = Query(None),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_session),
):
    if not await crud.get_supplier_by_id(db, supplier_id):
        raise HTTPException(status_code=404, detail="Supplier not found")
    bills, total = await crud.get_supplier_bills(
        db, supplier_id, search=search, page=params.page, page_size=params.page_size
    )
    return build_page([BillRead.from_purchase(b) for b in bills], total, params.page, params.page_size)


@router.post("/", response_model=SupplierRead, status_code=201)
async def create_supplier_endpoint(supplier_in: SupplierCreate, db: AsyncSession = Depends(get_async_session)):
    return await crud.create_supplier(db, supplier_in)


@router.patch("/{supplier_id}", response_model=SupplierRead)
async def update_supplier_endpoint(
    supplier_id: int,
    supplier_in: SupplierUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    supplier = await crud.update_supplier(db, supplier_id, supplier_in)
    if not supplier:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return supplier
