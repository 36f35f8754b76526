from ...domain.records import PermissionWithModule, RoleWithLinks
from ...errors import NotFoundError
from .named_service import NamedEntityService


class RoleService(NamedEntityService):
    repository_name = "roles"

    async def get_with_links(self, role_id: int) -> RoleWithLinks:
        views = await self.store.roles.list_with_links(role_id)
        if not views:
            raise NotFoundError("Role not found")
        return views[0]

    async def list_with_links(self) -> list[RoleWithLinks]:
        return await self.store.roles.list_with_links()

    async def permissions(self, role_id: int) -> list[PermissionWithModule]:
        if await self.store.roles.get_by_id(role_id) is None:
            raise NotFoundError("Role not found")
        return await self.store.permissions.list_for_role(role_id)
