from ...domain.records import GroupWithRoles
from ...errors import NotFoundError
from .named_service import NamedEntityService


class GroupService(NamedEntityService):
    repository_name = "groups"

    async def get_with_roles(self, group_id: int) -> GroupWithRoles:
        views = await self.store.groups.list_with_roles(group_id)
        if not views:
            raise NotFoundError("Group not found")
        return views[0]

    async def list_with_roles(self) -> list[GroupWithRoles]:
        return await self.store.groups.list_with_roles()
