from __future__ import annotations

from ...crud.store import EntityStore
from ...domain.ports import CredentialPort
from ...domain.records import UserWithGroups
from ...domain.validation import optional_text, require_text
from ...errors import DuplicateNameError, NotFoundError, ValidationError
from ...models.user import User
from .base import AdminService, logger


class UserService(AdminService):
    """Create, read, update and soft-delete users.

    Passwords are hashed through the credential port and stored as the
    user's credential reference; they are never returned.
    """

    def __init__(self, store: EntityStore, credentials: CredentialPort):
        super().__init__(store)
        self.credentials = credentials

    async def create(self, username: str, email: str, password: str) -> User:
        username = require_text(username, "username")
        email = require_text(email, "email")
        password = require_text(password, "password")

        if await self.store.users.find_conflicting(username, email) is not None:
            raise DuplicateNameError("Username or email already exists")

        async with self.transaction() as store:
            user = await store.users.create(
                username=username,
                email=email,
                password_hash=self.credentials.hash_password(password),
            )
        logger.info("User created: id=%s username=%s", user.id, user.username)
        return user

    async def get(self, user_id: int) -> User:
        user = await self.store.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def get_with_groups(self, user_id: int) -> UserWithGroups:
        views = await self.store.users.list_with_groups(user_id)
        if not views:
            raise NotFoundError("User not found")
        return views[0]

    async def list(self) -> list[UserWithGroups]:
        return await self.store.users.list_with_groups()

    async def update(
        self,
        user_id: int,
        *,
        username: str | None = None,
        email: str | None = None,
        password: str | None = None,
    ) -> User:
        username = optional_text(username, "username")
        email = optional_text(email, "email")
        password = optional_text(password, "password")
        if username is None and email is None and password is None:
            raise ValidationError("No updates provided")

        user = await self.store.users.get_active_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        if await self.store.users.find_conflicting(username, email, exclude_id=user_id):
            raise DuplicateNameError("Username or email already exists")

        async with self.transaction() as store:
            if username is not None:
                user.username = username
            if email is not None:
                user.email = email
            if password is not None:
                user.password_hash = self.credentials.hash_password(password)
            user = await store.users.update(user)
        logger.info("User updated: id=%s", user_id)
        return user

    async def soft_delete(self, user_id: int) -> None:
        async with self.transaction() as store:
            await store.users.soft_delete(user_id)
        logger.info("User deleted: id=%s", user_id)

    async def authenticate(self, username: str, password: str) -> User | None:
        user = await self.store.users.get_by_username(username)
        if user is None:
            return None
        if not self.credentials.verify_password(password, user.password_hash):
            return None
        return user
