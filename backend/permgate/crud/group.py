from sqlalchemy import and_, select

from ..domain.records import ChildRef, GroupWithRoles, fold_children
from ..models.group import Group
from ..models.group_role import GroupRole
from ..models.role import Role
from .base import NamedEntityRepository


class GroupRepository(NamedEntityRepository[Group]):
    model = Group
    label = "Group"

    async def list_with_roles(self, group_id: int | None = None) -> list[GroupWithRoles]:
        query = (
            select(Group, Role.id, Role.name)
            .outerjoin(GroupRole, GroupRole.group_id == Group.id)
            .outerjoin(Role, and_(Role.id == GroupRole.role_id, Role.is_deleted.is_(False)))
            .order_by(Group.id, Role.id)
            .execution_options(populate_existing=True)
        )
        if group_id is None:
            query = query.where(Group.is_deleted.is_(False))
        else:
            query = query.where(Group.id == group_id)
        result = await self.session.execute(query)
        return fold_children(
            result.all(),
            parent_key=lambda row: row[0].id,
            make_parent=lambda row: GroupWithRoles(
                id=row[0].id,
                name=row[0].name,
                description=row[0].description,
                created_at=row[0].created_at,
                is_deleted=row[0].is_deleted,
            ),
            children={
                "roles": lambda row: (
                    (row[1], ChildRef(id=row[1], name=row[2])) if row[1] is not None else None
                ),
            },
        )
