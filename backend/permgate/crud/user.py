from sqlalchemy import and_, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.records import UserWithGroups, fold_children
from ..errors import DuplicateNameError, NotFoundError
from ..models.group import Group
from ..models.user import User
from ..models.user_group import UserGroup


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, username: str, email: str, password_hash: str) -> User:
        user = User(username=username, email=email, password_hash=password_hash)
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateNameError("Username or email already exists") from exc
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: int) -> User | None:
        return await self.session.get(User, user_id, populate_existing=True)

    async def get_active_by_id(self, user_id: int) -> User | None:
        result = await self.session.execute(
            select(User).where(User.id == user_id, User.is_deleted.is_(False))
        )
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> User | None:
        result = await self.session.execute(
            select(User).where(User.username == username, User.is_deleted.is_(False))
        )
        return result.scalar_one_or_none()

    async def find_conflicting(
        self, username: str | None, email: str | None, exclude_id: int | None = None
    ) -> User | None:
        clauses = []
        if username is not None:
            clauses.append(User.username == username)
        if email is not None:
            clauses.append(User.email == email)
        if not clauses:
            return None
        query = select(User).where(or_(*clauses), User.is_deleted.is_(False))
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def list_with_groups(self, user_id: int | None = None) -> list[UserWithGroups]:
        query = (
            select(User, Group.id, Group.name)
            .outerjoin(UserGroup, UserGroup.user_id == User.id)
            .outerjoin(Group, and_(Group.id == UserGroup.group_id, Group.is_deleted.is_(False)))
            .order_by(User.id, Group.id)
            .execution_options(populate_existing=True)
        )
        if user_id is None:
            query = query.where(User.is_deleted.is_(False))
        else:
            query = query.where(User.id == user_id)
        result = await self.session.execute(query)
        return fold_children(
            result.all(),
            parent_key=lambda row: row[0].id,
            make_parent=lambda row: UserWithGroups(
                id=row[0].id,
                username=row[0].username,
                email=row[0].email,
                created_at=row[0].created_at,
            ),
            children={
                "groups": lambda row: (row[1], row[2]) if row[1] is not None else None,
            },
        )

    async def update(self, user: User) -> User:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateNameError("Username or email already exists") from exc
        await self.session.refresh(user)
        return user

    async def soft_delete(self, user_id: int) -> None:
        result = await self.session.execute(
            update(User)
            .where(User.id == user_id, User.is_deleted.is_(False))
            .values(is_deleted=True)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("User not found")
