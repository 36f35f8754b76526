from ...crud.store import EntityStore
from ...domain.records import EffectivePermission


class PermissionResolver:
    """Computes the permissions a user reaches through group -> role -> permission.

    A fixed two-hop traversal with no role hierarchy. Nothing is cached: every
    call reads the graph as currently committed, so a membership change is
    visible to the very next call.
    """

    def __init__(self, store: EntityStore):
        self.store = store

    @staticmethod
    def _dedupe(permissions: list[EffectivePermission]) -> frozenset[EffectivePermission]:
        by_id: dict[int, EffectivePermission] = {}
        for permission in permissions:
            by_id.setdefault(permission.id, permission)
        return frozenset(by_id.values())

    async def effective_permissions(self, user_id: int) -> frozenset[EffectivePermission]:
        rows = await self.store.permissions.list_effective_for_user(user_id)
        return self._dedupe(rows)

    async def effective_permissions_for_module(
        self, user_id: int, module_id: int
    ) -> frozenset[EffectivePermission]:
        rows = await self.store.permissions.list_effective_for_user(user_id, module_id=module_id)
        return self._dedupe(rows)
