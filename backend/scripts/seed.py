"""
Create the schema and seed the default modules and bootstrap administrator.

The same routine runs at application startup; this script is for preparing a
database without starting the server.

Usage:
    python -m scripts.seed
"""
import asyncio

from permgate.bootstrap import DEFAULT_MODULES, bootstrap, create_schema
from permgate.config import settings
from permgate.crud.store import EntityStore
from permgate.database import get_engine, get_session_factory
from permgate.dependencies import get_credentials


async def seed() -> None:
    engine = get_engine()
    await create_schema(engine)
    print("Schema ready")

    async with get_session_factory()() as session:
        store = EntityStore(session)
        await bootstrap(store, get_credentials(), settings)
        modules = await store.modules.list_active()
        admin = await store.users.get_by_username(settings.bootstrap_admin_username)

    seeded = {module["name"] for module in DEFAULT_MODULES}
    print(f"Modules: {', '.join(m.name for m in modules if m.name in seeded)}")
    if admin is None:
        print("No administrator seeded (BOOTSTRAP_ADMIN_PASSWORD not set)")
    else:
        print(f"Administrator: {admin.username} (id={admin.id})")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
