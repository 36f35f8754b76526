from fastapi import APIRouter, Depends, status

from ..dependencies import get_membership_service, get_role_service, require_permission
from ..schemas.common import MessageResponse
from ..schemas.named import (
    RoleCreate,
    RolePermissionAdd,
    RoleResponse,
    RoleUpdate,
    RoleWithLinksResponse,
)
from ..schemas.permission import PermissionResponse
from ..services.admin import MembershipService, RoleService

router = APIRouter(prefix="/roles", tags=["roles"])


@router.get(
    "",
    response_model=list[RoleWithLinksResponse],
    dependencies=[Depends(require_permission("roles", "read"))],
)
async def list_roles(roles: RoleService = Depends(get_role_service)):
    return await roles.list_with_links()


@router.post(
    "",
    response_model=RoleResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("roles", "create"))],
)
async def create_role(payload: RoleCreate, roles: RoleService = Depends(get_role_service)):
    return await roles.create(payload.name, payload.description)


@router.get(
    "/{role_id}",
    response_model=RoleWithLinksResponse,
    dependencies=[Depends(require_permission("roles", "read"))],
)
async def get_role(role_id: int, roles: RoleService = Depends(get_role_service)):
    return await roles.get_with_links(role_id)


@router.put(
    "/{role_id}",
    response_model=RoleResponse,
    dependencies=[Depends(require_permission("roles", "update"))],
)
async def update_role(
    role_id: int, payload: RoleUpdate, roles: RoleService = Depends(get_role_service)
):
    return await roles.update(role_id, name=payload.name, description=payload.description)


@router.delete(
    "/{role_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_permission("roles", "delete"))],
)
async def delete_role(role_id: int, roles: RoleService = Depends(get_role_service)):
    await roles.soft_delete(role_id)
    return MessageResponse(message="Role deleted successfully")


@router.get(
    "/{role_id}/permissions",
    response_model=list[PermissionResponse],
    dependencies=[Depends(require_permission("roles", "read"))],
)
async def list_role_permissions(role_id: int, roles: RoleService = Depends(get_role_service)):
    return await roles.permissions(role_id)


@router.post(
    "/{role_id}/permissions",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("roles", "update"))],
)
async def grant_permission(
    role_id: int,
    payload: RolePermissionAdd,
    memberships: MembershipService = Depends(get_membership_service),
):
    await memberships.grant_permission(role_id, payload.permission_id)
    return MessageResponse(message="Permission assigned to role successfully")


@router.delete(
    "/{role_id}/permissions/{permission_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_permission("roles", "update"))],
)
async def revoke_permission(
    role_id: int,
    permission_id: int,
    memberships: MembershipService = Depends(get_membership_service),
):
    await memberships.revoke_permission(role_id, permission_id)
    return MessageResponse(message="Permission removed from role successfully")
