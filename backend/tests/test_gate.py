import logging

import pytest

from permgate.errors import AuthorizationDenied, DuplicateAssociationError
from permgate.services.access import (
    AccessPolicy,
    AuthorizationGate,
    DecisionBasis,
    PermissionResolver,
)


async def _admin(graph):
    # Occupies id 1 so the other subjects are never the bypass identity
    admin = await graph.user("admin")
    assert admin.id == 1
    return admin


@pytest.fixture()
def gate(store) -> AuthorizationGate:
    return AuthorizationGate(store)


@pytest.fixture()
def strict_gate(store) -> AuthorizationGate:
    return AuthorizationGate(store, AccessPolicy.strict())


@pytest.mark.anyio
async def test_scenario_a_granted_read_and_denied_delete(graph, gate) -> None:
    await _admin(graph)
    u1 = await graph.user("u1")
    read = await graph.permission("users", "read")
    await graph.chain(u1.id, "g1", "r1", read.id)

    allowed = await gate.decide(u1.id, "users", "read")
    denied = await gate.decide(u1.id, "users", "delete")

    assert allowed.allowed is True
    assert allowed.basis is DecisionBasis.GRANT
    assert denied.allowed is False
    assert denied.basis is DecisionBasis.DENIED
    assert denied.reason == "Access denied: delete on users"


@pytest.mark.anyio
async def test_scenario_b_read_bypass_without_memberships(graph, gate) -> None:
    await _admin(graph)
    u1 = await graph.user("u1")
    await graph.module("users")

    read = await gate.decide(u1.id, "users", "read")
    delete = await gate.decide(u1.id, "users", "delete")

    assert (read.allowed, read.basis) == (True, DecisionBasis.READ_BYPASS)
    assert (delete.allowed, delete.basis) == (False, DecisionBasis.DENIED)


@pytest.mark.anyio
async def test_scenario_c_admin_bypass_on_unknown_module(graph, gate) -> None:
    admin = await graph.user("admin")

    decision = await gate.decide(admin.id, "anything", "delete")

    assert admin.id == 1
    assert (decision.allowed, decision.basis) == (True, DecisionBasis.ADMIN_BYPASS)


@pytest.mark.anyio
async def test_scenario_d_duplicate_grant_counts_once(graph, gate, store) -> None:
    await _admin(graph)
    u1 = await graph.user("u1")
    p1 = await graph.permission("users", "update")
    _, r1 = await graph.chain(u1.id, "g1", "r1")

    await graph.memberships.grant_permission(r1.id, p1.id)
    with pytest.raises(DuplicateAssociationError):
        await graph.memberships.grant_permission(r1.id, p1.id)

    effective = await PermissionResolver(store).effective_permissions(u1.id)
    assert [permission.id for permission in effective] == [p1.id]
    assert (await gate.decide(u1.id, "users", "update")).allowed is True


@pytest.mark.anyio
async def test_empty_graph_denies_everything_but_overrides(graph, gate) -> None:
    await _admin(graph)
    u1 = await graph.user("u1")
    for module in ["users", "groups", "roles"]:
        await graph.module(module)

    for module in ["users", "groups", "roles", "unknown"]:
        for action in ["create", "update", "delete", "export"]:
            assert (await gate.decide(u1.id, module, action)).allowed is False
        assert (await gate.decide(u1.id, module, "read")).allowed is True


@pytest.mark.anyio
async def test_decisions_are_deterministic(graph, gate) -> None:
    await _admin(graph)
    u1 = await graph.user("u1")
    update = await graph.permission("users", "update")
    await graph.chain(u1.id, "g1", "r1", update.id)

    first = [await gate.decide(u1.id, "users", action) for action in ["update", "delete"]]
    again = [await gate.decide(u1.id, "users", action) for action in ["update", "delete"]]

    assert first == again


@pytest.mark.anyio
async def test_strict_policy_has_no_overrides(graph, strict_gate) -> None:
    admin = await graph.user("admin")
    await graph.module("users")

    assert (await strict_gate.decide(admin.id, "users", "read")).allowed is False
    assert (await strict_gate.decide(admin.id, "users", "delete")).allowed is False


@pytest.mark.anyio
async def test_admin_bypass_follows_configured_id(graph, store) -> None:
    admin = await _admin(graph)
    u1 = await graph.user("u1")
    gate = AuthorizationGate(
        store, AccessPolicy(read_bypass_enabled=False, admin_bypass_user_id=u1.id)
    )

    assert (await gate.decide(u1.id, "users", "delete")).basis is DecisionBasis.ADMIN_BYPASS
    assert (await gate.decide(admin.id, "users", "delete")).allowed is False


@pytest.mark.anyio
async def test_deleted_module_grants_nothing(graph, strict_gate) -> None:
    await _admin(graph)
    u1 = await graph.user("u1")
    update = await graph.permission("reports", "update")
    await graph.chain(u1.id, "g1", "r1", update.id)
    assert (await strict_gate.decide(u1.id, "reports", "update")).allowed is True

    await graph.modules.soft_delete(update.module_id)

    assert (await strict_gate.decide(u1.id, "reports", "update")).allowed is False


@pytest.mark.anyio
async def test_require_raises_with_pair_only(graph, gate, caplog) -> None:
    await _admin(graph)
    u1 = await graph.user("u1")
    read = await graph.permission("users", "read")
    await graph.chain(u1.id, "g1", "r1", read.id)

    with caplog.at_level(logging.WARNING, logger="permgate.gate"):
        with pytest.raises(AuthorizationDenied) as exc_info:
            await gate.require(u1.id, "users", "delete")

    assert exc_info.value.status_code == 403
    assert exc_info.value.message == "Access denied: delete on users"
    assert exc_info.value.details == {"module": "users", "action": "delete"}
    assert any("module=users action=delete" in record.getMessage() for record in caplog.records)


@pytest.mark.anyio
async def test_require_returns_decision_when_allowed(graph, gate) -> None:
    admin = await _admin(graph)
    decision = await gate.require(admin.id, "anything", "purge")

    assert decision.basis is DecisionBasis.ADMIN_BYPASS


def test_policy_from_settings_and_active_overrides() -> None:
    class _Settings:
        read_bypass_enabled = False
        admin_bypass_user_id = 7

    policy = AccessPolicy.from_settings(_Settings())

    assert policy.active_overrides == ["admin_bypass"]
    assert policy.override_for(7, "delete") is DecisionBasis.ADMIN_BYPASS
    assert policy.override_for(8, "read") is None
    assert AccessPolicy().active_overrides == ["read_bypass", "admin_bypass"]
    assert AccessPolicy.strict().active_overrides == []
