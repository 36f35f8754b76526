import pytest
from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError

from permgate.errors import DuplicateAssociationError, DuplicateNameError, NotFoundError
from permgate.models import UserGroup


@pytest.mark.anyio
async def test_list_excludes_soft_deleted_but_get_by_id_returns_it(store) -> None:
    ops = await store.groups.create(name="ops")
    dev = await store.groups.create(name="dev")
    await store.commit()

    await store.groups.soft_delete(ops.id)
    await store.commit()

    assert [group.name for group in await store.groups.list_active()] == ["dev"]
    deleted = await store.groups.get_by_id(ops.id)
    assert deleted is not None
    assert deleted.is_deleted is True
    assert await store.groups.get_active_by_id(ops.id) is None
    assert (await store.groups.get_by_id(dev.id)).is_deleted is False


@pytest.mark.anyio
async def test_list_follows_insertion_order(store) -> None:
    for name in ["zeta", "alpha", "mid"]:
        await store.roles.create(name=name)
    await store.commit()

    assert [role.name for role in await store.roles.list_active()] == ["zeta", "alpha", "mid"]


@pytest.mark.anyio
async def test_soft_delete_twice_is_not_found(store) -> None:
    module = await store.modules.create(name="reports")
    await store.commit()
    await store.modules.soft_delete(module.id)
    await store.commit()

    with pytest.raises(NotFoundError, match="Module not found"):
        await store.modules.soft_delete(module.id)
    with pytest.raises(NotFoundError):
        await store.modules.soft_delete(9999)


@pytest.mark.anyio
async def test_active_name_collision_is_rejected_by_constraint(store) -> None:
    await store.roles.create(name="editor")
    await store.commit()

    with pytest.raises(DuplicateNameError, match="Role name already exists"):
        await store.roles.create(name="editor")


@pytest.mark.anyio
async def test_deleted_name_can_be_reused(store) -> None:
    first = await store.groups.create(name="ops")
    await store.commit()
    await store.groups.soft_delete(first.id)
    await store.commit()

    second = await store.groups.create(name="ops")
    await store.commit()

    assert second.id != first.id
    assert [group.id for group in await store.groups.list_active()] == [second.id]


@pytest.mark.anyio
async def test_permission_pair_stays_reserved_after_delete(store) -> None:
    module = await store.modules.create(name="users")
    await store.commit()
    permission = await store.permissions.create(module_id=module.id, action="read")
    await store.commit()
    await store.permissions.soft_delete(permission.id)
    await store.commit()

    with pytest.raises(DuplicateNameError, match="module and action"):
        await store.permissions.create(module_id=module.id, action="read")


@pytest.mark.anyio
async def test_association_add_twice_is_rejected(store, graph) -> None:
    user = await graph.user("alice")
    group = await graph.groups.create("ops")

    await store.user_groups.add(user.id, group.id)
    await store.commit()

    with pytest.raises(DuplicateAssociationError, match="already in this group"):
        await store.user_groups.add(user.id, group.id)
    assert await store.user_groups.exists(user.id, group.id) is True


@pytest.mark.anyio
async def test_association_requires_active_endpoints(store, graph) -> None:
    group = await graph.groups.create("ops")
    role = await graph.roles.create("viewer")
    await graph.roles.soft_delete(role.id)

    with pytest.raises(NotFoundError, match="Role not found"):
        await store.group_roles.add(group.id, role.id)
    with pytest.raises(NotFoundError, match="Group not found"):
        await store.group_roles.add(4242, role.id)


@pytest.mark.anyio
async def test_association_remove_missing_pair(store, graph) -> None:
    role = await graph.roles.create("viewer")
    permission = await graph.permission("users", "read")

    with pytest.raises(NotFoundError, match="Permission not assigned to role"):
        await store.role_permissions.remove(role.id, permission.id)

    await store.role_permissions.add(role.id, permission.id)
    await store.commit()
    await store.role_permissions.remove(role.id, permission.id)
    await store.commit()

    assert await store.role_permissions.exists(role.id, permission.id) is False


@pytest.mark.anyio
async def test_edges_survive_soft_delete_of_endpoint(store, graph) -> None:
    user = await graph.user("alice")
    group = await graph.groups.create("ops")
    await graph.memberships.add_user_to_group(group.id, user.id)

    await graph.groups.soft_delete(group.id)

    assert await store.user_groups.exists(user.id, group.id) is True


@pytest.mark.anyio
async def test_foreign_keys_are_enforced(db_session) -> None:
    with pytest.raises(IntegrityError):
        await db_session.execute(insert(UserGroup).values(user_id=77, group_id=88))


async def _stale_miss(*args, **kwargs):
    return None


async def _stale_false(*args, **kwargs):
    return False


@pytest.mark.anyio
async def test_constraint_rejects_duplicate_edge_when_precheck_is_stale(
    store, graph, monkeypatch
) -> None:
    user_id = (await graph.user("alice")).id
    group_id = (await graph.groups.create("ops")).id
    await graph.memberships.add_user_to_group(group_id, user_id)
    monkeypatch.setattr(store.user_groups, "exists", _stale_false)

    with pytest.raises(DuplicateAssociationError, match="already in this group"):
        await graph.memberships.add_user_to_group(group_id, user_id)

    monkeypatch.undo()
    assert [g.name for g in await graph.groups.list()] == ["ops"]
    assert await store.user_groups.exists(user_id, group_id) is True
    views = await store.users.list_with_groups(user_id)
    assert views[0].groups == ("ops",)


@pytest.mark.anyio
async def test_constraint_rejects_duplicate_user_when_precheck_is_stale(
    store, graph, monkeypatch
) -> None:
    await graph.user("alice")
    bob_id = (await graph.user("bob")).id
    monkeypatch.setattr(store.users, "find_conflicting", _stale_miss)

    with pytest.raises(DuplicateNameError, match="Username or email already exists"):
        await graph.users.create("alice", "other@example.com", "secret")
    with pytest.raises(DuplicateNameError, match="Username or email already exists"):
        await graph.users.update(bob_id, email="alice@example.com")

    monkeypatch.undo()
    listed = await store.users.list_with_groups()
    assert [(view.username, view.email) for view in listed] == [
        ("alice", "alice@example.com"),
        ("bob", "bob@example.com"),
    ]
    carol = await graph.user("carol")
    assert carol.id > bob_id


@pytest.mark.anyio
async def test_constraint_rejects_duplicate_name_when_precheck_is_stale(
    store, graph, monkeypatch
) -> None:
    await graph.groups.create("ops")
    dev_id = (await graph.groups.create("dev")).id
    monkeypatch.setattr(store.groups, "get_by_name", _stale_miss)

    with pytest.raises(DuplicateNameError, match="Group name already exists"):
        await graph.groups.create("ops")
    with pytest.raises(DuplicateNameError, match="Group name already exists"):
        await graph.groups.update(dev_id, name="ops")

    monkeypatch.undo()
    assert [group.name for group in await graph.groups.list()] == ["ops", "dev"]
    assert (await graph.groups.create("qa")).name == "qa"
