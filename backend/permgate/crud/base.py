from typing import Generic, TypeVar

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import DuplicateNameError, NotFoundError
from ..models.group import Group
from ..models.module import Module
from ..models.role import Role

NamedModel = TypeVar("NamedModel", Group, Role, Module)


class NamedEntityRepository(Generic[NamedModel]):
    """Store contract shared by groups, roles and modules.

    ``label`` is the human name used in error messages ("Group", "Role", ...).
    """

    model: type[NamedModel]
    label: str

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, name: str, description: str | None = None) -> NamedModel:
        entity = self.model(name=name, description=description)
        self.session.add(entity)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateNameError(f"{self.label} name already exists") from exc
        await self.session.refresh(entity)
        return entity

    async def get_by_id(self, entity_id: int) -> NamedModel | None:
        return await self.session.get(self.model, entity_id, populate_existing=True)

    async def get_active_by_id(self, entity_id: int) -> NamedModel | None:
        result = await self.session.execute(
            select(self.model).where(
                self.model.id == entity_id, self.model.is_deleted.is_(False)
            )
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str, exclude_id: int | None = None) -> NamedModel | None:
        query = select(self.model).where(
            self.model.name == name, self.model.is_deleted.is_(False)
        )
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def list_active(self) -> list[NamedModel]:
        result = await self.session.execute(
            select(self.model)
            .where(self.model.is_deleted.is_(False))
            .order_by(self.model.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def update(self, entity: NamedModel) -> NamedModel:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateNameError(f"{self.label} name already exists") from exc
        await self.session.refresh(entity)
        return entity

    async def soft_delete(self, entity_id: int) -> None:
        result = await self.session.execute(
            update(self.model)
            .where(self.model.id == entity_id, self.model.is_deleted.is_(False))
            .values(is_deleted=True)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError(f"{self.label} not found")
