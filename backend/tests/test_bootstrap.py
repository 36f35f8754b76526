import pytest

from permgate.bootstrap import DEFAULT_MODULES, bootstrap, seed_admin, seed_modules


class _Settings:
    bootstrap_admin_username = "admin"
    bootstrap_admin_email = "admin@example.com"
    bootstrap_admin_password = "admin123@"


@pytest.mark.anyio
async def test_seeds_modules_once(store) -> None:
    first = await seed_modules(store)
    second = await seed_modules(store)

    assert first == [module["name"] for module in DEFAULT_MODULES]
    assert second == []
    assert [module.name for module in await store.modules.list_active()] == first


@pytest.mark.anyio
async def test_admin_is_first_user(store, credentials) -> None:
    await bootstrap(store, credentials, _Settings())

    admin = await store.users.get_by_username("admin")
    assert admin.id == 1
    assert credentials.verify_password("admin123@", admin.password_hash)


@pytest.mark.anyio
async def test_admin_seed_is_idempotent(store, credentials) -> None:
    await bootstrap(store, credentials, _Settings())
    await bootstrap(store, credentials, _Settings())

    assert len(await store.users.list_with_groups()) == 1


@pytest.mark.anyio
async def test_admin_skipped_without_password(store, credentials) -> None:
    user = await seed_admin(
        store, credentials, username="admin", email="admin@example.com", password=None
    )

    assert user is None
    assert await store.users.list_with_groups() == []
