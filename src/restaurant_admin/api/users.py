from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.api.deps import PageParams, page_params
from restaurant_admin.crud import user as crud
from restaurant_admin.crud.common import build_page
from restaurant_admin.db.session import get_async_session
from restaurant_admin.schemas.common import Page
from restaurant_admin.schemas.user import PasswordChange, UserCreate, UserOut, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/", response_model=Page[UserOut])
async def list_users(
    search: Optional[str] = Query(None),
    params: PageParams = Depends(page_params),
    session: AsyncSession = Depends(get_async_session),
):
    users, total = await crud.get_users(session, search=search, page=params.page, page_size=params.page_size)
    return build_page([UserOut.from_orm_with_role(u) for u in users], total, params.page, params.page_size)


@router.get("/{user_id}", response_model=UserOut)
async def get_profile(user_id: int, session: AsyncSession = Depends(get_async_session)):
    user = await crud.get_user_by_id(session, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return UserOut.from_orm_with_role(user)


@router.post("/", response_model=UserOut, status_code=201)
async def create_user_endpoint(user_in: UserCreate, session: AsyncSession = Depends(get_async_session)):
    try:
        user = await crud.create_user(session, user_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return UserOut.from_orm_with_role(user)


@router.patch("/{user_id}", response_model=UserOut)
async def update_profile(
    user_id: int,
    user_in: UserUpdate,
    session: AsyncSession = Depends(get_async_session),
):
    try:
        user = await crud.update_user(session, user_id, user_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return UserOut.from_orm_with_role(user)


@router.post("/{user_id}/password", status_code=204)
async def change_password(
    user_id: int,
    change: PasswordChange,
    session: AsyncSession = Depends(get_async_session),
):
    try:
        user = await crud.change_password(session, user_id, change)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
