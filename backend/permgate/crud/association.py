from typing import Any

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import DuplicateAssociationError, NotFoundError
from ..models.group import Group
from ..models.group_role import GroupRole
from ..models.permission import Permission
from ..models.role import Role
from ..models.role_permission import RolePermission
from ..models.user import User
from ..models.user_group import UserGroup


class AssociationRepository:
    """Composite-keyed edge table between two entity kinds.

    Edges have no identity of their own: ``add`` inserts the pair, ``remove``
    physically deletes it. Both endpoints must be active rows when an edge is
    added. The composite primary key is what rejects a duplicate edge; the
    ``exists`` pre-check only lets a lone caller fail with a clearer message
    before the insert, and a concurrent loser gets the same error from the
    constraint.
    """

    model: Any
    parent_model: Any
    child_model: Any
    parent_column: str
    child_column: str
    duplicate_message: str
    missing_message: str

    def __init__(self, session: AsyncSession):
        self.session = session

    def _match(self, parent_id: int, child_id: int):
        return (
            getattr(self.model, self.parent_column) == parent_id,
            getattr(self.model, self.child_column) == child_id,
        )

    async def _require_active(self, model: Any, entity_id: int) -> None:
        result = await self.session.execute(
            select(model.id).where(model.id == entity_id, model.is_deleted.is_(False))
        )
        if result.first() is None:
            raise NotFoundError(f"{model.__name__} not found")

    async def exists(self, parent_id: int, child_id: int) -> bool:
        result = await self.session.execute(
            select(getattr(self.model, self.parent_column)).where(
                *self._match(parent_id, child_id)
            )
        )
        return result.first() is not None

    async def add(self, parent_id: int, child_id: int) -> None:
        await self._require_active(self.parent_model, parent_id)
        await self._require_active(self.child_model, child_id)
        if await self.exists(parent_id, child_id):
            raise DuplicateAssociationError(self.duplicate_message)
        try:
            await self.session.execute(
                insert(self.model).values(
                    {self.parent_column: parent_id, self.child_column: child_id}
                )
            )
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateAssociationError(self.duplicate_message) from exc

    async def remove(self, parent_id: int, child_id: int) -> None:
        result = await self.session.execute(
            delete(self.model)
            .where(*self._match(parent_id, child_id))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError(self.missing_message)


class UserGroupRepository(AssociationRepository):
    model = UserGroup
    parent_model = User
    child_model = Group
    parent_column = "user_id"
    child_column = "group_id"
    duplicate_message = "User is already in this group"
    missing_message = "User is not in this group"


class GroupRoleRepository(AssociationRepository):
    model = GroupRole
    parent_model = Group
    child_model = Role
    parent_column = "group_id"
    child_column = "role_id"
    duplicate_message = "Role is already assigned to this group"
    missing_message = "Role is not assigned to this group"


class RolePermissionRepository(AssociationRepository):
    model = RolePermission
    parent_model = Role
    child_model = Permission
    parent_column = "role_id"
    child_column = "permission_id"
    duplicate_message = "Permission already assigned to role"
    missing_message = "Permission not assigned to role"
