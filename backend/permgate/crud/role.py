from sqlalchemy import and_, select

from ..domain.records import ChildRef, RoleWithLinks, fold_children
from ..models.group import Group
from ..models.group_role import GroupRole
from ..models.permission import Permission
from ..models.role import Role
from ..models.role_permission import RolePermission
from .base import NamedEntityRepository


class RoleRepository(NamedEntityRepository[Role]):
    model = Role
    label = "Role"

    async def list_with_links(self, role_id: int | None = None) -> list[RoleWithLinks]:
        # Both outer joins fan out; fold_children drops the repeated children
        query = (
            select(Role, Group.id, Group.name, Permission.id, Permission.name)
            .outerjoin(GroupRole, GroupRole.role_id == Role.id)
            .outerjoin(Group, and_(Group.id == GroupRole.group_id, Group.is_deleted.is_(False)))
            .outerjoin(RolePermission, RolePermission.role_id == Role.id)
            .outerjoin(
                Permission,
                and_(
                    Permission.id == RolePermission.permission_id,
                    Permission.is_deleted.is_(False),
                ),
            )
            .order_by(Role.id, Group.id, Permission.id)
            .execution_options(populate_existing=True)
        )
        if role_id is None:
            query = query.where(Role.is_deleted.is_(False))
        else:
            query = query.where(Role.id == role_id)
        result = await self.session.execute(query)
        return fold_children(
            result.all(),
            parent_key=lambda row: row[0].id,
            make_parent=lambda row: RoleWithLinks(
                id=row[0].id,
                name=row[0].name,
                description=row[0].description,
                created_at=row[0].created_at,
                is_deleted=row[0].is_deleted,
            ),
            children={
                "groups": lambda row: (
                    (row[1], ChildRef(id=row[1], name=row[2])) if row[1] is not None else None
                ),
                "permissions": lambda row: (
                    (row[3], ChildRef(id=row[3], name=row[4])) if row[3] is not None else None
                ),
            },
        )
