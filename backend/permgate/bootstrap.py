"""Schema creation and first-run seed data.

Seeds the default modules (one per administrable entity kind) and, when
``BOOTSTRAP_ADMIN_PASSWORD`` is set, the bootstrap administrator. On an empty
database the administrator is the first user row and therefore gets id 1,
the identity the admin bypass refers to by default.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from .crud.store import EntityStore
from .domain.ports import CredentialPort
from .models import Base
from .models.user import User

logger = logging.getLogger("permgate.bootstrap")

DEFAULT_MODULES = [
    {"name": "users", "description": "User accounts"},
    {"name": "groups", "description": "Groups and their members"},
    {"name": "roles", "description": "Roles and their grants"},
    {"name": "permissions", "description": "Module/action permissions"},
    {"name": "modules", "description": "Protected modules"},
]


async def create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)


async def seed_modules(store: EntityStore) -> list[str]:
    created = []
    for module_data in DEFAULT_MODULES:
        if await store.modules.get_by_name(module_data["name"]) is not None:
            continue
        await store.modules.create(**module_data)
        created.append(module_data["name"])
    await store.commit()
    for name in created:
        logger.info("Seeded module: %s", name)
    return created


async def seed_admin(
    store: EntityStore,
    credentials: CredentialPort,
    *,
    username: str,
    email: str,
    password: str | None,
) -> User | None:
    if not password:
        logger.info("BOOTSTRAP_ADMIN_PASSWORD not set; skipping administrator seed")
        return None

    existing = await store.users.find_conflicting(username, email)
    if existing is not None:
        return existing

    user = await store.users.create(
        username=username,
        email=email,
        password_hash=credentials.hash_password(password),
    )
    await store.commit()
    if user.id != 1:
        logger.warning(
            "Bootstrap administrator created with id=%s; the admin bypass targets id 1",
            user.id,
        )
    else:
        logger.info("Seeded bootstrap administrator: id=%s username=%s", user.id, username)
    return user


async def bootstrap(store: EntityStore, credentials: CredentialPort, settings) -> None:
    await seed_modules(store)
    await seed_admin(
        store,
        credentials,
        username=settings.bootstrap_admin_username,
        email=settings.bootstrap_admin_email,
        password=settings.bootstrap_admin_password,
    )
