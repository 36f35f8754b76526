from ...domain.validation import require_id
from ...errors import NotFoundError, ValidationError
from .base import AdminService, logger


class MembershipService(AdminService):
    """Adds and removes the edges of the access graph.

    user -> group (membership), group -> role, role -> permission. The store
    checks that both endpoints are active and that the edge is new; removal
    deletes the edge row outright.
    """

    async def add_user_to_group(self, group_id: int, user_id: int) -> None:
        async with self.transaction() as store:
            await store.user_groups.add(require_id(user_id, "user_id"), group_id)
        logger.info("User added to group: user_id=%s group_id=%s", user_id, group_id)

    async def remove_user_from_group(self, group_id: int, user_id: int) -> None:
        async with self.transaction() as store:
            await store.user_groups.remove(user_id, group_id)
        logger.info("User removed from group: user_id=%s group_id=%s", user_id, group_id)

    async def add_role_to_group(self, group_id: int, role_id: int) -> None:
        async with self.transaction() as store:
            await store.group_roles.add(group_id, require_id(role_id, "role_id"))
        logger.info("Role added to group: group_id=%s role_id=%s", group_id, role_id)

    async def remove_role_from_group(self, group_id: int, role_id: int) -> None:
        async with self.transaction() as store:
            await store.group_roles.remove(group_id, role_id)
        logger.info("Role removed from group: group_id=%s role_id=%s", group_id, role_id)

    async def grant_permission(self, role_id: int, permission_id: int) -> None:
        async with self.transaction() as store:
            await store.role_permissions.add(role_id, require_id(permission_id, "permission_id"))
        logger.info(
            "Permission granted to role: role_id=%s permission_id=%s", role_id, permission_id
        )

    async def revoke_permission(self, role_id: int, permission_id: int) -> None:
        async with self.transaction() as store:
            await store.role_permissions.remove(role_id, permission_id)
        logger.info(
            "Permission revoked from role: role_id=%s permission_id=%s", role_id, permission_id
        )

    async def grant_permission_to_roles(self, permission_id: int, role_ids: list[int]) -> None:
        """Grant one permission to several roles, all or nothing."""
        if not role_ids:
            raise ValidationError("role_ids must not be empty", details={"field": "role_ids"})
        if await self.store.permissions.get_active_by_id(permission_id) is None:
            raise NotFoundError("Permission not found")

        async with self.transaction() as store:
            for role_id in dict.fromkeys(role_ids):
                await store.role_permissions.add(require_id(role_id, "role_id"), permission_id)
        logger.info(
            "Permission granted to roles: permission_id=%s role_ids=%s", permission_id, role_ids
        )
