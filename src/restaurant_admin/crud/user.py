import logging
from typing import List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from restaurant_admin.crud.common import apply_where, paginate, search_clause, update_fields
from restaurant_admin.models import Role, User
from restaurant_admin.schemas.user import PasswordChange, UserCreate, UserUpdate
from restaurant_admin.services.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


async def get_users(
    db: AsyncSession,
    search: Optional[str] = None,
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[User], int]:
    stmt = select(User).options(selectinload(User.role)).order_by(User.id)
    stmt = apply_where(stmt, search_clause(search, User.username, User.name, User.email))
    return await paginate(db, stmt, page, page_size)


async def get_user_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
    stmt = (
        select(User)
        .where(User.id == user_id)
        .options(selectinload(User.role))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalars().first()


async def count_users(db: AsyncSession) -> int:
    return (await db.execute(select(func.count(User.id)))).scalar_one()


async def _check_role(db: AsyncSession, role_id: Optional[int]) -> None:
    if role_id is not None and not await db.get(Role, role_id):
        raise ValueError(f"Role with id={role_id} not found")


async def create_user(db: AsyncSession, user_in: UserCreate) -> User:
    exists = await db.execute(select(User.id).where(User.username == user_in.username))
    if exists.first():
        raise ValueError(f"Username '{user_in.username}' is taken")
    await _check_role(db, user_in.role_id)

    data = user_in.model_dump()
    password = data.pop("password")
    user = User(**data, password_hash=hash_password(password))
    db.add(user)
    await db.commit()
    logger.info("User %s created: %s", user.id, user.username)
    return await get_user_by_id(db, user.id)


async def update_user(db: AsyncSession, user_id: int, user_in: UserUpdate) -> Optional[User]:
    user = await db.get(User, user_id)
    if not user:
        return None

    update_data = update_fields(user_in, nullable=("email", "phone", "country_code", "avatar", "role_id"))
    if "role_id" in update_data:
        await _check_role(db, update_data["role_id"])
    for key, value in update_data.items():
        setattr(user, key, value)

    await db.commit()
    logger.info("User %s profile updated: %s", user_id, sorted(update_data))
    return await get_user_by_id(db, user_id)


async def change_password(db: AsyncSession, user_id: int, change: PasswordChange) -> Optional[User]:
    """
    Смена пароля: новый совпадает с подтверждением, отличается от текущего,
    текущий должен подойти.
    """
    user = await db.get(User, user_id)
    if not user:
        return None

    if change.new_password != change.confirm_password:
        raise ValueError("New password and confirmation do not match")
    if change.new_password == change.current_password:
        raise ValueError("New password must differ from the current one")
    if not verify_password(change.current_password, user.password_hash):
        logger.warning("Wrong current password for user %s", user_id)
        raise ValueError("Current password is incorrect")

    user.password_hash = hash_password(change.new_password)
    await db.commit()
    logger.info("User %s changed password", user_id)
    return await get_user_by_id(db, user_id)
