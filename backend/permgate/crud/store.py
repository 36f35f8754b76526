from sqlalchemy.ext.asyncio import AsyncSession

from .association import GroupRoleRepository, RolePermissionRepository, UserGroupRepository
from .group import GroupRepository
from .module import ModuleRepository
from .permission import PermissionRepository
from .role import RoleRepository
from .user import UserRepository


class EntityStore:
    """Every repository bound to one session, i.e. one unit of work.

    Built once per request (or per test) and handed to the services, the
    resolver and the gate; nothing here is process-global.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)
        self.groups = GroupRepository(session)
        self.roles = RoleRepository(session)
        self.modules = ModuleRepository(session)
        self.permissions = PermissionRepository(session)
        self.user_groups = UserGroupRepository(session)
        self.group_roles = GroupRoleRepository(session)
        self.role_permissions = RolePermissionRepository(session)

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
