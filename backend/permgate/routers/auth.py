from fastapi import APIRouter, Depends, status

from ..crud.store import EntityStore
from ..dependencies import get_credentials, get_current_user, get_store, get_user_service
from ..domain.ports import CredentialPort
from ..errors import AuthError
from ..models.user import User
from ..schemas.auth import (
    CurrentUser,
    EffectivePermissionResponse,
    TokenResponse,
    UserLogin,
    UserRegister,
)
from ..services.access import PermissionResolver
from ..services.admin import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(user: User, credentials: CredentialPort) -> TokenResponse:
    return TokenResponse(
        access_token=credentials.issue_token(user.id),
        user=CurrentUser.model_validate(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserRegister,
    users: UserService = Depends(get_user_service),
    credentials: CredentialPort = Depends(get_credentials),
) -> TokenResponse:
    user = await users.create(payload.username, payload.email, payload.password)
    return _token_response(user, credentials)


@router.post("/login", response_model=TokenResponse)
async def login(
    payload: UserLogin,
    users: UserService = Depends(get_user_service),
    credentials: CredentialPort = Depends(get_credentials),
) -> TokenResponse:
    user = await users.authenticate(payload.username, payload.password)
    if user is None:
        raise AuthError("Invalid credentials")
    return _token_response(user, credentials)


@router.get("/me", response_model=CurrentUser)
async def me(user: User = Depends(get_current_user)) -> User:
    return user


@router.get("/me/permissions", response_model=list[EffectivePermissionResponse])
async def my_permissions(
    user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    permissions = await PermissionResolver(store).effective_permissions(user.id)
    return sorted(permissions, key=lambda permission: permission.id)
