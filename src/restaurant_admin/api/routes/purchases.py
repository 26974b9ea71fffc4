from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.api.deps import PageParams, page_params
from restaurant_admin.crud import purchase as crud
from restaurant_admin.crud.common import build_page
from restaurant_admin.db.session import get_async_session
from restaurant_admin.schemas.common import Page
from restaurant_admin.schemas.purchase import PurchaseCreate, PurchaseRead, PurchaseUpdate

router = APIRouter(prefix="/purchases", tags=["purchases"])


@router.get("/", response_model=Page[PurchaseRead])
async def list_purchases(
    search: Optional[str] = Query(None, description="Накладная, поставщик или позиция"),
    ingredient: Optional[str] = Query(None, description="Точное название позиции"),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_session),
):
    purchases, total = await crud.get_purchases(
        db, search=search, ingredient=ingredient, page=params.page, page_size=params.page_size
    )
    return build_page(
        [PurchaseRead.from_orm_with_totals(p) for p in purchases], total, params.page, params.page_size
    )


@router.get("/ingredients", response_model=List[str])
async def list_ingredients(db: AsyncSession = Depends(get_async_session)):
    return await crud.get_ingredient_names(db)


@router.get("/{purchase_id}", response_model=PurchaseRead)
async def get_purchase(purchase_id: int, db: AsyncSession = Depends(get_async_session)):
    purchase = await crud.get_purchase_by_id(db, purchase_id)
    if not purchase:
        raise HTTPException(status_code=404, detail="Purchase not found")
    return PurchaseRead.from_orm_with_totals(purchase)


@router.post("/", response_model=PurchaseRead, status_code=201)
async def create_purchase_endpoint(purchase_in: PurchaseCreate, db: AsyncSession = Depends(get_async_session)):
    try:
        purchase = await crud.create_purchase(db, purchase_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PurchaseRead.from_orm_with_totals(purchase)


@router.patch("/{purchase_id}", response_model=PurchaseRead)
async def update_purchase_endpoint(
    purchase_id: int,
    purchase_in: PurchaseUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Частичное обновление закупки. Переданный список позиций заменяет старый.
    """
    try:
        purchase = await crud.update_purchase(db, purchase_id, purchase_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not purchase:
        raise HTTPException(status_code=404, detail="Purchase not found")
    return PurchaseRead.from_orm_with_totals(purchase)


@router.delete("/{purchase_id}", status_code=204)
async def remove_purchase(purchase_id: int, db: AsyncSession = Depends(get_async_session)):
    deleted = await crud.delete_purchase(db, purchase_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Purchase not found")
