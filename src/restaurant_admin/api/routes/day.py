from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.crud import day as crud
from restaurant_admin.db.session import get_async_session
from restaurant_admin.schemas.day import DayStatus

router = APIRouter(prefix="/day", tags=["day"])


@router.get("/", response_model=DayStatus)
async def get_day_status(db: AsyncSession = Depends(get_async_session)):
    return crud.day_status(await crud.get_current_day(db))


@router.post("/open", response_model=DayStatus)
async def open_day(db: AsyncSession = Depends(get_async_session)):
    try:
        day = await crud.open_day(db)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return crud.day_status(day)


@router.post("/close", response_model=DayStatus)
async def close_day(db: AsyncSession = Depends(get_async_session)):
    try:
        day = await crud.close_day(db)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return crud.day_status(day)
