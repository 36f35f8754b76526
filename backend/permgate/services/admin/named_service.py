from __future__ import annotations

from typing import Any

from ...crud.base import NamedEntityRepository
from ...domain.validation import optional_text, require_text
from ...errors import DuplicateNameError, NotFoundError, ValidationError
from .base import AdminService, logger


class NamedEntityService(AdminService):
    """Mutation API for the name + description kinds (groups, roles, modules)."""

    repository_name: str

    @property
    def repository(self) -> NamedEntityRepository[Any]:
        return getattr(self.store, self.repository_name)

    @property
    def label(self) -> str:
        return self.repository.label

    async def create(self, name: str, description: str | None = None) -> Any:
        name = require_text(name, "name")
        if await self.repository.get_by_name(name) is not None:
            raise DuplicateNameError(f"{self.label} name already exists")

        async with self.transaction():
            entity = await self.repository.create(name=name, description=description)
        logger.info("%s created: id=%s name=%s", self.label, entity.id, entity.name)
        return entity

    async def get(self, entity_id: int) -> Any:
        entity = await self.repository.get_by_id(entity_id)
        if entity is None:
            raise NotFoundError(f"{self.label} not found")
        return entity

    async def list(self) -> list[Any]:
        return await self.repository.list_active()

    async def update(
        self, entity_id: int, *, name: str | None = None, description: str | None = None
    ) -> Any:
        name = optional_text(name, "name")
        if name is None and description is None:
            raise ValidationError("No updates provided")

        entity = await self.repository.get_active_by_id(entity_id)
        if entity is None:
            raise NotFoundError(f"{self.label} not found")
        if name is not None and name != entity.name:
            if await self.repository.get_by_name(name, exclude_id=entity_id) is not None:
                raise DuplicateNameError(f"{self.label} name already exists")

        async with self.transaction():
            if name is not None:
                entity.name = name
            if description is not None:
                entity.description = description
            entity = await self.repository.update(entity)
        logger.info("%s updated: id=%s", self.label, entity_id)
        return entity

    async def soft_delete(self, entity_id: int) -> None:
        # Edges to a deleted entity are kept; resolution skips deleted rows
        async with self.transaction():
            await self.repository.soft_delete(entity_id)
        logger.info("%s deleted: id=%s", self.label, entity_id)
