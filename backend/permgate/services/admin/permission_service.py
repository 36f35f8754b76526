from __future__ import annotations

from ...domain.records import PermissionWithModule
from ...domain.validation import optional_text, require_id, require_text
from ...errors import DuplicateNameError, NotFoundError, ValidationError
from ...models.permission import Permission
from .base import AdminService, logger

_DUPLICATE_MESSAGE = "Permission already exists for this module and action"


class PermissionService(AdminService):
    """Mutation API for permissions, the (module, action) capability tuples.

    A permission must point at an active module and carry a non-blank action.
    The pair is unique across all rows, deleted ones included.
    """

    async def _require_module(self, module_id: int) -> None:
        if await self.store.modules.get_active_by_id(module_id) is None:
            raise NotFoundError("Module not found")

    async def create(
        self,
        module_id: int,
        action: str,
        name: str | None = None,
        description: str | None = None,
    ) -> PermissionWithModule:
        module_id = require_id(module_id, "module_id")
        action = require_text(action, "action")
        await self._require_module(module_id)
        if await self.store.permissions.get_by_module_action(module_id, action) is not None:
            raise DuplicateNameError(_DUPLICATE_MESSAGE)

        async with self.transaction() as store:
            permission = await store.permissions.create(
                module_id=module_id, action=action, name=name, description=description
            )
        logger.info(
            "Permission created: id=%s module_id=%s action=%s",
            permission.id,
            module_id,
            action,
        )
        return await self.get(permission.id)

    async def get(self, permission_id: int) -> PermissionWithModule:
        permission = await self.store.permissions.get_with_module(permission_id)
        if permission is None:
            raise NotFoundError("Permission not found")
        return permission

    async def list(self) -> list[PermissionWithModule]:
        return await self.store.permissions.list_with_module()

    async def update(
        self,
        permission_id: int,
        *,
        module_id: int | None = None,
        action: str | None = None,
        name: str | None = None,
        description: str | None = None,
    ) -> PermissionWithModule:
        action = optional_text(action, "action")
        if module_id is None and action is None and name is None and description is None:
            raise ValidationError("No updates provided")

        permission: Permission | None = await self.store.permissions.get_active_by_id(
            permission_id
        )
        if permission is None:
            raise NotFoundError("Permission not found")

        target_module_id = permission.module_id
        if module_id is not None:
            target_module_id = require_id(module_id, "module_id")
            await self._require_module(target_module_id)
        target_action = action if action is not None else permission.action

        if (target_module_id, target_action) != (permission.module_id, permission.action):
            existing = await self.store.permissions.get_by_module_action(
                target_module_id, target_action, exclude_id=permission_id
            )
            if existing is not None:
                raise DuplicateNameError(_DUPLICATE_MESSAGE)

        async with self.transaction() as store:
            permission.module_id = target_module_id
            permission.action = target_action
            if name is not None:
                permission.name = name
            if description is not None:
                permission.description = description
            await store.permissions.update(permission)
        logger.info("Permission updated: id=%s", permission_id)
        return await self.get(permission_id)

    async def soft_delete(self, permission_id: int) -> None:
        async with self.transaction() as store:
            await store.permissions.soft_delete(permission_id)
        logger.info("Permission deleted: id=%s", permission_id)
