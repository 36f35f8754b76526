from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PermissionCreate(BaseModel):
    module_id: int = Field(..., gt=0)
    action: str = Field(..., min_length=1, max_length=100)
    name: str | None = Field(None, max_length=100)
    description: str | None = None


class PermissionUpdate(BaseModel):
    module_id: int | None = Field(None, gt=0)
    action: str | None = Field(None, min_length=1, max_length=100)
    name: str | None = Field(None, max_length=100)
    description: str | None = None


class PermissionResponse(BaseModel):
    id: int
    name: str | None = None
    module_id: int
    module_name: str
    action: str
    description: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PermissionRolesGrant(BaseModel):
    role_ids: list[int] = Field(..., min_length=1)
