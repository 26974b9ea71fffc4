import logging
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from restaurant_admin.crud.common import apply_where, paginate, search_clause
from restaurant_admin.models import Role, RolePermission
from restaurant_admin.schemas.user import RoleCreate
from restaurant_admin.services.permissions import all_codes

logger = logging.getLogger(__name__)


def _with_relations(stmt):
    return stmt.options(selectinload(Role.permissions), selectinload(Role.users))


async def get_roles(
    db: AsyncSession,
    search: Optional[str] = None,
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[Role], int]:
    stmt = _with_relations(select(Role)).order_by(Role.id)
    stmt = apply_where(stmt, search_clause(search, Role.name))
    return await paginate(db, stmt, page, page_size)


async def get_role_by_id(db: AsyncSession, role_id: int) -> Optional[Role]:
    stmt = _with_relations(select(Role)).where(Role.id == role_id).execution_options(populate_existing=True)
    result = await db.execute(stmt)
    return result.scalars().first()


def _validate_codes(codes: Iterable[str]) -> set:
    codes = set(codes)
    unknown = codes - all_codes()
    if unknown:
        raise ValueError(f"Unknown permission codes: {sorted(unknown)}")
    return codes


async def create_role(db: AsyncSession, role_in: RoleCreate) -> Role:
    exists = await db.execute(select(Role.id).where(func.lower(Role.name) == role_in.name.lower()))
    if exists.first():
        raise ValueError(f"Role '{role_in.name}' already exists")
    codes = _validate_codes(role_in.permissions)

    role = Role(name=role_in.name)
    role.permissions = [RolePermission(code=code) for code in sorted(codes)]
    db.add(role)
    await db.commit()
    logger.info("Role %s created: %s (%d permissions)", role.id, role.name, len(codes))
    return await get_role_by_id(db, role.id)


async def set_role_permissions(db: AsyncSession, role_id: int, codes: List[str]) -> Optional[Role]:
    """
    Заменяет набор включённых прав роли.
    """
    role = await get_role_by_id(db, role_id)
    if not role:
        return None
    enabled = _validate_codes(codes)

    current = {p.code: p for p in role.permissions}
    role.permissions = [current.get(code) or RolePermission(code=code) for code in sorted(enabled)]
    await db.commit()
    logger.info(
        "Role %s permissions: +%s -%s",
        role.name,
        sorted(enabled - set(current)),
        sorted(set(current) - enabled),
    )
    return await get_role_by_id(db, role_id)
