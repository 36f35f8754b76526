from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.records import EffectivePermission, PermissionWithModule
from ..errors import DuplicateNameError, NotFoundError
from ..models.group import Group
from ..models.group_role import GroupRole
from ..models.module import Module
from ..models.permission import Permission
from ..models.role import Role
from ..models.role_permission import RolePermission
from ..models.user import User
from ..models.user_group import UserGroup

_DUPLICATE_MESSAGE = "Permission already exists for this module and action"


def _with_module(permission: Permission, module_name: str) -> PermissionWithModule:
    return PermissionWithModule(
        id=permission.id,
        name=permission.name,
        module_id=permission.module_id,
        module_name=module_name,
        action=permission.action,
        description=permission.description,
        created_at=permission.created_at,
        is_deleted=permission.is_deleted,
    )


class PermissionRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        module_id: int,
        action: str,
        name: str | None = None,
        description: str | None = None,
    ) -> Permission:
        permission = Permission(
            name=name,
            module_id=module_id,
            action=action,
            description=description,
        )
        self.session.add(permission)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateNameError(_DUPLICATE_MESSAGE) from exc
        await self.session.refresh(permission)
        return permission

    async def get_by_id(self, permission_id: int) -> Permission | None:
        return await self.session.get(Permission, permission_id, populate_existing=True)

    async def get_active_by_id(self, permission_id: int) -> Permission | None:
        result = await self.session.execute(
            select(Permission).where(
                Permission.id == permission_id, Permission.is_deleted.is_(False)
            )
        )
        return result.scalar_one_or_none()

    async def get_by_module_action(
        self, module_id: int, action: str, exclude_id: int | None = None
    ) -> Permission | None:
        # Deleted rows included: the pair is reserved for good
        query = select(Permission).where(
            Permission.module_id == module_id, Permission.action == action
        )
        if exclude_id is not None:
            query = query.where(Permission.id != exclude_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_with_module(self, permission_id: int) -> PermissionWithModule | None:
        result = await self.session.execute(
            select(Permission, Module.name)
            .join(Module, Module.id == Permission.module_id)
            .where(Permission.id == permission_id)
            .execution_options(populate_existing=True)
        )
        row = result.first()
        if row is None:
            return None
        return _with_module(row[0], row[1])

    async def list_with_module(self) -> list[PermissionWithModule]:
        result = await self.session.execute(
            select(Permission, Module.name)
            .join(Module, Module.id == Permission.module_id)
            .where(Permission.is_deleted.is_(False))
            .order_by(Permission.id)
            .execution_options(populate_existing=True)
        )
        return [_with_module(permission, module_name) for permission, module_name in result.all()]

    async def list_for_role(self, role_id: int) -> list[PermissionWithModule]:
        result = await self.session.execute(
            select(Permission, Module.name)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .join(Module, Module.id == Permission.module_id)
            .where(RolePermission.role_id == role_id, Permission.is_deleted.is_(False))
            .order_by(Permission.id)
            .execution_options(populate_existing=True)
        )
        return [_with_module(permission, module_name) for permission, module_name in result.all()]

    async def list_effective_for_user(
        self, user_id: int, module_id: int | None = None
    ) -> list[EffectivePermission]:
        """Permissions reachable from a user through group -> role -> permission.

        One composed join over the current committed graph. Every entity on the
        path must be active. The DISTINCT collapses permissions reachable along
        several paths; callers still treat the result as a set.
        """
        query = (
            select(
                Permission.id,
                Permission.name,
                Permission.module_id,
                Module.name,
                Permission.action,
                Permission.description,
            )
            .join(Module, Module.id == Permission.module_id)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .join(Role, Role.id == RolePermission.role_id)
            .join(GroupRole, GroupRole.role_id == Role.id)
            .join(Group, Group.id == GroupRole.group_id)
            .join(UserGroup, UserGroup.group_id == Group.id)
            .join(User, User.id == UserGroup.user_id)
            .where(
                User.id == user_id,
                User.is_deleted.is_(False),
                Group.is_deleted.is_(False),
                Role.is_deleted.is_(False),
                Permission.is_deleted.is_(False),
                Module.is_deleted.is_(False),
            )
            .distinct()
        )
        if module_id is not None:
            query = query.where(Permission.module_id == module_id)
        result = await self.session.execute(query)
        return [
            EffectivePermission(
                id=row[0],
                name=row[1],
                module_id=row[2],
                module_name=row[3],
                action=row[4],
                description=row[5],
            )
            for row in result.all()
        ]

    async def update(self, permission: Permission) -> Permission:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateNameError(_DUPLICATE_MESSAGE) from exc
        await self.session.refresh(permission)
        return permission

    async def soft_delete(self, permission_id: int) -> None:
        result = await self.session.execute(
            update(Permission)
            .where(Permission.id == permission_id, Permission.is_deleted.is_(False))
            .values(is_deleted=True)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("Permission not found")
