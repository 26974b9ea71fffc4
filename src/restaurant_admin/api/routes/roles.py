from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.api.deps import PageParams, page_params
from restaurant_admin.crud import role as crud
from restaurant_admin.crud.common import build_page
from restaurant_admin.db.session import get_async_session
from restaurant_admin.schemas.common import Page
from restaurant_admin.schemas.user import RoleCreate, RolePermissions, RolePermissionsUpdate, RoleRead
from restaurant_admin.services.permissions import grouped_permissions

router = APIRouter(prefix="/roles", tags=["roles"])


def _permissions_view(role) -> dict:
    return {
        "role_id": role.id,
        "role_name": role.name,
        "groups": grouped_permissions({p.code for p in role.permissions}),
    }


@router.get("/", response_model=Page[RoleRead])
async def list_roles(
    search: Optional[str] = Query(None, description="Поиск по названию"),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_session),
):
    roles, total = await crud.get_roles(db, search=search, page=params.page, page_size=params.page_size)
    return build_page([RoleRead.from_orm_with_codes(r) for r in roles], total, params.page, params.page_size)


@router.post("/", response_model=RoleRead, status_code=201)
async def create_role_endpoint(role_in: RoleCreate, db: AsyncSession = Depends(get_async_session)):
    try:
        role = await crud.create_role(db, role_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return RoleRead.from_orm_with_codes(role)


@router.get("/{role_id}/permissions", response_model=RolePermissions)
async def get_role_permissions(role_id: int, db: AsyncSession = Depends(get_async_session)):
    """
    Справочник прав по категориям с отметкой, какие включены у роли.
    """
    role = await crud.get_role_by_id(db, role_id)
    if not role:
        raise HTTPException(status_code=404, detail="Role not found")
    return _permissions_view(role)


@router.put("/{role_id}/permissions", response_model=RolePermissions)
async def update_role_permissions(
    role_id: int,
    body: RolePermissionsUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    try:
        role = await crud.set_role_permissions(db, role_id, body.permissions)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not role:
        raise HTTPException(status_code=404, detail="Role not found")
    return _permissions_view(role)
