from fastapi import APIRouter

from . import auth, groups, modules, permissions, roles, users

router = APIRouter(prefix="/api")

for _router in [
    auth.router,
    users.router,
    groups.router,
    roles.router,
    permissions.router,
    modules.router,
]:
    router.include_router(_router)
