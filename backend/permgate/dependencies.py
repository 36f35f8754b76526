from collections.abc import AsyncGenerator, Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from .config import settings
from .crud.store import EntityStore
from .database import get_session
from .domain.ports import CredentialPort
from .errors import AuthError
from .models.user import User
from .security.tokens import TokenService
from .services.access import AccessPolicy, AuthorizationGate, Decision
from .services.admin import (
    GroupService,
    MembershipService,
    ModuleService,
    PermissionService,
    RoleService,
    UserService,
)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


def get_store(db: AsyncSession = Depends(get_db)) -> EntityStore:
    return EntityStore(db)


def get_credentials() -> CredentialPort:
    return TokenService(
        secret_key=settings.secret_key,
        algorithm=settings.algorithm,
        expire_minutes=settings.access_token_expire_minutes,
    )


def get_access_policy() -> AccessPolicy:
    return AccessPolicy.from_settings(settings)


def get_gate(
    store: EntityStore = Depends(get_store),
    policy: AccessPolicy = Depends(get_access_policy),
) -> AuthorizationGate:
    return AuthorizationGate(store, policy)


def get_user_service(
    store: EntityStore = Depends(get_store),
    credentials: CredentialPort = Depends(get_credentials),
) -> UserService:
    return UserService(store, credentials)


def get_group_service(store: EntityStore = Depends(get_store)) -> GroupService:
    return GroupService(store)


def get_role_service(store: EntityStore = Depends(get_store)) -> RoleService:
    return RoleService(store)


def get_module_service(store: EntityStore = Depends(get_store)) -> ModuleService:
    return ModuleService(store)


def get_permission_service(store: EntityStore = Depends(get_store)) -> PermissionService:
    return PermissionService(store)


def get_membership_service(store: EntityStore = Depends(get_store)) -> MembershipService:
    return MembershipService(store)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    store: EntityStore = Depends(get_store),
    credential_port: CredentialPort = Depends(get_credentials),
) -> User:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthError("Not authenticated")

    user_id = credential_port.verify_token(credentials.credentials)
    user = await store.users.get_active_by_id(user_id)
    if user is None:
        raise AuthError("User not found")
    return user


def require_permission(module: str, action: str) -> Callable:
    """Dependency factory guarding a route with one (module, action) check.

    Raises ``AuthorizationDenied`` (403) naming the pair when the gate says no.
    """

    async def dependency(
        user: User = Depends(get_current_user),
        gate: AuthorizationGate = Depends(get_gate),
    ) -> Decision:
        return await gate.require(user.id, module, action)

    return dependency
