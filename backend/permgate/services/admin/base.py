import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from ...crud.store import EntityStore

logger = logging.getLogger("permgate.admin")


class AdminService:
    def __init__(self, store: EntityStore):
        self.store = store

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[EntityStore]:
        """Commit on success, roll back and re-raise on any failure."""
        try:
            yield self.store
            await self.store.commit()
        except Exception:
            await self.store.rollback()
            raise
