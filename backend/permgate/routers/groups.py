from fastapi import APIRouter, Depends, status

from ..dependencies import get_group_service, get_membership_service, require_permission
from ..schemas.common import MessageResponse
from ..schemas.named import (
    GroupCreate,
    GroupResponse,
    GroupRoleAdd,
    GroupUpdate,
    GroupUserAdd,
    GroupWithRolesResponse,
)
from ..services.admin import GroupService, MembershipService

router = APIRouter(prefix="/groups", tags=["groups"])


@router.get(
    "",
    response_model=list[GroupWithRolesResponse],
    dependencies=[Depends(require_permission("groups", "read"))],
)
async def list_groups(groups: GroupService = Depends(get_group_service)):
    return await groups.list_with_roles()


@router.post(
    "",
    response_model=GroupResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("groups", "create"))],
)
async def create_group(payload: GroupCreate, groups: GroupService = Depends(get_group_service)):
    return await groups.create(payload.name, payload.description)


@router.get(
    "/{group_id}",
    response_model=GroupWithRolesResponse,
    dependencies=[Depends(require_permission("groups", "read"))],
)
async def get_group(group_id: int, groups: GroupService = Depends(get_group_service)):
    return await groups.get_with_roles(group_id)


@router.put(
    "/{group_id}",
    response_model=GroupResponse,
    dependencies=[Depends(require_permission("groups", "update"))],
)
async def update_group(
    group_id: int, payload: GroupUpdate, groups: GroupService = Depends(get_group_service)
):
    return await groups.update(group_id, name=payload.name, description=payload.description)


@router.delete(
    "/{group_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_permission("groups", "delete"))],
)
async def delete_group(group_id: int, groups: GroupService = Depends(get_group_service)):
    await groups.soft_delete(group_id)
    return MessageResponse(message="Group deleted successfully")


@router.post(
    "/{group_id}/users",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("groups", "update"))],
)
async def add_user_to_group(
    group_id: int,
    payload: GroupUserAdd,
    memberships: MembershipService = Depends(get_membership_service),
):
    await memberships.add_user_to_group(group_id, payload.user_id)
    return MessageResponse(message="User added to group successfully")


@router.delete(
    "/{group_id}/users/{user_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_permission("groups", "update"))],
)
async def remove_user_from_group(
    group_id: int,
    user_id: int,
    memberships: MembershipService = Depends(get_membership_service),
):
    await memberships.remove_user_from_group(group_id, user_id)
    return MessageResponse(message="User removed from group successfully")


@router.post(
    "/{group_id}/roles",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("roles", "update"))],
)
async def add_role_to_group(
    group_id: int,
    payload: GroupRoleAdd,
    memberships: MembershipService = Depends(get_membership_service),
):
    await memberships.add_role_to_group(group_id, payload.role_id)
    return MessageResponse(message="Role assigned to group successfully")


@router.delete(
    "/{group_id}/roles/{role_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_permission("roles", "update"))],
)
async def remove_role_from_group(
    group_id: int,
    role_id: int,
    memberships: MembershipService = Depends(get_membership_service),
):
    await memberships.remove_role_from_group(group_id, role_id)
    return MessageResponse(message="Role removed from group successfully")
