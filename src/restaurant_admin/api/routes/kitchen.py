from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.crud import order as crud
from restaurant_admin.db.session import get_async_session
from restaurant_admin.schemas.order import KitchenBoard, KitchenOrderRead
from restaurant_admin.services.kitchen import order_progress

router = APIRouter(prefix="/kitchen", tags=["kitchen"])


@router.get("/board", response_model=KitchenBoard)
async def kitchen_board(db: AsyncSession = Depends(get_async_session)):
    """
    Экран кухни: заказы по колонкам Receive / Preparing / Ready / Served с прогрессом.
    """
    board = await crud.get_kitchen_board(db)
    return {
        column: [KitchenOrderRead.from_orm_with_progress(order, progress) for order, progress in orders]
        for column, orders in board.items()
    }


@router.post("/orders/{order_id}/items/{item_id}/advance", response_model=KitchenOrderRead)
async def advance_order_item(order_id: int, item_id: int, db: AsyncSession = Depends(get_async_session)):
    try:
        order = await crud.advance_item(db, order_id, item_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return KitchenOrderRead.from_orm_with_progress(order, order_progress(i.status for i in order.items))
