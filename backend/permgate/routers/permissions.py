from fastapi import APIRouter, Depends, status

from ..dependencies import get_membership_service, get_permission_service, require_permission
from ..schemas.common import MessageResponse
from ..schemas.permission import (
    PermissionCreate,
    PermissionResponse,
    PermissionRolesGrant,
    PermissionUpdate,
)
from ..services.admin import MembershipService, PermissionService

router = APIRouter(prefix="/permissions", tags=["permissions"])


@router.get(
    "",
    response_model=list[PermissionResponse],
    dependencies=[Depends(require_permission("permissions", "read"))],
)
async def list_permissions(permissions: PermissionService = Depends(get_permission_service)):
    return await permissions.list()


@router.post(
    "",
    response_model=PermissionResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("permissions", "create"))],
)
async def create_permission(
    payload: PermissionCreate,
    permissions: PermissionService = Depends(get_permission_service),
):
    return await permissions.create(
        payload.module_id,
        payload.action,
        name=payload.name,
        description=payload.description,
    )


@router.get(
    "/{permission_id}",
    response_model=PermissionResponse,
    dependencies=[Depends(require_permission("permissions", "read"))],
)
async def get_permission(
    permission_id: int, permissions: PermissionService = Depends(get_permission_service)
):
    return await permissions.get(permission_id)


@router.put(
    "/{permission_id}",
    response_model=PermissionResponse,
    dependencies=[Depends(require_permission("permissions", "update"))],
)
async def update_permission(
    permission_id: int,
    payload: PermissionUpdate,
    permissions: PermissionService = Depends(get_permission_service),
):
    return await permissions.update(
        permission_id,
        module_id=payload.module_id,
        action=payload.action,
        name=payload.name,
        description=payload.description,
    )


@router.delete(
    "/{permission_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_permission("permissions", "delete"))],
)
async def delete_permission(
    permission_id: int, permissions: PermissionService = Depends(get_permission_service)
):
    await permissions.soft_delete(permission_id)
    return MessageResponse(message="Permission deleted successfully")


@router.post(
    "/{permission_id}/roles",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("roles", "update"))],
)
async def grant_permission_to_roles(
    permission_id: int,
    payload: PermissionRolesGrant,
    memberships: MembershipService = Depends(get_membership_service),
):
    await memberships.grant_permission_to_roles(permission_id, payload.role_ids)
    return MessageResponse(message="Permission assigned to roles successfully")
