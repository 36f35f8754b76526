from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .common import ChildRefResponse


class NamedCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None


class NamedUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None


class NamedResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupCreate(NamedCreate):
    pass


class GroupUpdate(NamedUpdate):
    pass


class GroupResponse(NamedResponse):
    pass


class GroupWithRolesResponse(GroupResponse):
    roles: list[ChildRefResponse] = []


class GroupUserAdd(BaseModel):
    user_id: int = Field(..., gt=0)


class GroupRoleAdd(BaseModel):
    role_id: int = Field(..., gt=0)


class RoleCreate(NamedCreate):
    pass


class RoleUpdate(NamedUpdate):
    pass


class RoleResponse(NamedResponse):
    pass


class RoleWithLinksResponse(RoleResponse):
    groups: list[ChildRefResponse] = []
    permissions: list[ChildRefResponse] = []


class RolePermissionAdd(BaseModel):
    permission_id: int = Field(..., gt=0)


class ModuleCreate(NamedCreate):
    pass


class ModuleUpdate(NamedUpdate):
    pass


class ModuleResponse(NamedResponse):
    pass
