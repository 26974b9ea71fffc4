from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from restaurant_admin.config import settings

PASSWORD_FIELD = dict(min_length=settings.PASSWORD_MIN_LENGTH, max_length=settings.PASSWORD_MAX_LENGTH)


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    permissions: List[str] = []


class RoleRead(BaseModel):
    id: int
    name: str
    permissions: List[str] = []
    users_count: int = 0
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_orm_with_codes(cls, role):
        return cls(
            id=role.id,
            name=role.name,
            permissions=sorted(p.code for p in role.permissions),
            users_count=len(role.users),
            created_at=role.created_at,
            updated_at=role.updated_at,
        )


class PermissionNode(BaseModel):
    code: str
    name: str
    is_enabled: bool
    children: List["PermissionNode"] = []


class RolePermissions(BaseModel):
    role_id: int
    role_name: str
    groups: Dict[str, List[PermissionNode]]


class RolePermissionsUpdate(BaseModel):
    # полный список включённых кодов, остальные выключаются
    permissions: List[str]


class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    name: str = Field(..., min_length=1, max_length=128)
    email: Optional[str] = Field(None, max_length=128)
    phone: Optional[str] = Field(None, max_length=32)
    country_code: Optional[str] = Field(None, max_length=8)
    avatar: Optional[str] = None
    role_id: Optional[int] = None
    password: str = Field(..., **PASSWORD_FIELD)


class UserUpdate(BaseModel):
    """Профиль: имя, контакты, аватар, роль."""

    name: Optional[str] = Field(None, min_length=1, max_length=128)
    email: Optional[str] = Field(None, max_length=128)
    phone: Optional[str] = Field(None, max_length=32)
    country_code: Optional[str] = Field(None, max_length=8)
    avatar: Optional[str] = None
    role_id: Optional[int] = None

    class Config:
        extra = "forbid"


class PasswordChange(BaseModel):
    current_password: str = Field(..., **PASSWORD_FIELD)
    new_password: str = Field(..., **PASSWORD_FIELD)
    confirm_password: str = Field(..., **PASSWORD_FIELD)


class UserOut(BaseModel):
    id: int
    username: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    country_code: Optional[str] = None
    avatar: Optional[str] = None
    role_id: Optional[int] = None
    role_name: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_orm_with_role(cls, user):
        return cls(
            id=user.id,
            username=user.username,
            name=user.name,
            email=user.email,
            phone=user.phone,
            country_code=user.country_code,
            avatar=user.avatar,
            role_id=user.role_id,
            role_name=user.role.name if user.role else None,
            created_at=user.created_at,
        )
