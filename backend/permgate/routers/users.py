from fastapi import APIRouter, Depends, status

from ..dependencies import get_user_service, require_permission
from ..schemas.common import MessageResponse
from ..schemas.user import UserCreate, UserResponse, UserUpdate, UserWithGroupsResponse
from ..services.admin import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "",
    response_model=list[UserWithGroupsResponse],
    dependencies=[Depends(require_permission("users", "read"))],
)
async def list_users(users: UserService = Depends(get_user_service)):
    return await users.list()


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("users", "create"))],
)
async def create_user(payload: UserCreate, users: UserService = Depends(get_user_service)):
    return await users.create(payload.username, payload.email, payload.password)


@router.get(
    "/{user_id}",
    response_model=UserWithGroupsResponse,
    dependencies=[Depends(require_permission("users", "read"))],
)
async def get_user(user_id: int, users: UserService = Depends(get_user_service)):
    return await users.get_with_groups(user_id)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    dependencies=[Depends(require_permission("users", "update"))],
)
async def update_user(
    user_id: int, payload: UserUpdate, users: UserService = Depends(get_user_service)
):
    return await users.update(
        user_id,
        username=payload.username,
        email=payload.email,
        password=payload.password,
    )


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_permission("users", "delete"))],
)
async def delete_user(user_id: int, users: UserService = Depends(get_user_service)):
    await users.soft_delete(user_id)
    return MessageResponse(message="User deleted successfully")
