import logging

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError, OperationalError

from permgate.dependencies import get_access_policy, get_credentials, get_store
from permgate.main import app
from permgate.services.access import AccessPolicy


@pytest.fixture()
def client(store, credentials):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_credentials] = lambda: credentials
    app.dependency_overrides[get_access_policy] = lambda: AccessPolicy()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _register(client: TestClient, username: str) -> dict:
    response = client.post(
        "/api/auth/register",
        json={"username": username, "email": f"{username}@example.com", "password": "pw"},
    )
    assert response.status_code == 201
    body = response.json()
    return {"id": body["user"]["id"], "headers": {"Authorization": f"Bearer {body['access_token']}"}}


@pytest.fixture()
def admin(client):
    admin = _register(client, "admin")
    assert admin["id"] == 1
    return admin


@pytest.fixture()
def alice(client, admin):
    return _register(client, "alice")


def test_health_route_is_registered() -> None:
    assert any(getattr(route, "path", None) == "/health" for route in app.routes)


def test_login_and_me(client, alice) -> None:
    response = client.post("/api/auth/login", json={"username": "alice", "password": "pw"})
    assert response.status_code == 200
    headers = {"Authorization": f"Bearer {response.json()['access_token']}"}

    me = client.get("/api/auth/me", headers=headers)

    assert me.status_code == 200
    assert me.json()["username"] == "alice"
    assert "password_hash" not in me.json()


def test_login_with_wrong_password(client, alice) -> None:
    response = client.post("/api/auth/login", json={"username": "alice", "password": "nope"})

    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid credentials"


def test_register_duplicate_is_conflict(client, alice) -> None:
    response = client.post(
        "/api/auth/register",
        json={"username": "alice", "email": "x@example.com", "password": "pw"},
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_NAME"


def test_missing_and_invalid_token(client) -> None:
    assert client.get("/api/users").status_code == 401
    response = client.get("/api/users", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTH_ERROR"


def test_read_bypass_lets_any_user_list(client, alice) -> None:
    response = client.get("/api/users", headers=alice["headers"])

    assert response.status_code == 200
    assert [user["username"] for user in response.json()] == ["admin", "alice"]


def test_denied_request_names_pair_only(client, alice) -> None:
    response = client.post("/api/groups", json={"name": "ops"}, headers=alice["headers"])

    assert response.status_code == 403
    error = response.json()["error"]
    assert error["code"] == "PERMISSION_DENIED"
    assert error["message"] == "Access denied: create on groups"
    assert error["details"] == {"module": "groups", "action": "create"}


def test_strict_policy_denies_read(client, alice) -> None:
    app.dependency_overrides[get_access_policy] = AccessPolicy.strict

    response = client.get("/api/users", headers=alice["headers"])

    assert response.status_code == 403


def test_granting_through_the_graph(client, admin, alice) -> None:
    h = admin["headers"]
    module = client.post("/api/modules", json={"name": "groups"}, headers=h).json()
    permission = client.post(
        "/api/permissions",
        json={"module_id": module["id"], "action": "create", "name": "groups.create"},
        headers=h,
    )
    assert permission.status_code == 201
    assert permission.json()["module_name"] == "groups"
    role = client.post("/api/roles", json={"name": "group-admin"}, headers=h).json()
    group = client.post("/api/groups", json={"name": "staff"}, headers=h).json()

    assert client.post(
        f"/api/roles/{role['id']}/permissions",
        json={"permission_id": permission.json()["id"]},
        headers=h,
    ).status_code == 201
    assert client.post(
        f"/api/groups/{group['id']}/roles", json={"role_id": role["id"]}, headers=h
    ).status_code == 201
    assert client.post(
        f"/api/groups/{group['id']}/users", json={"user_id": alice["id"]}, headers=h
    ).status_code == 201

    created = client.post("/api/groups", json={"name": "ops"}, headers=alice["headers"])
    assert created.status_code == 201

    mine = client.get("/api/auth/me/permissions", headers=alice["headers"]).json()
    assert [(p["module_name"], p["action"]) for p in mine] == [("groups", "create")]

    detail = client.get(f"/api/groups/{group['id']}", headers=h).json()
    assert [child["name"] for child in detail["roles"]] == ["group-admin"]
    role_detail = client.get(f"/api/roles/{role['id']}", headers=h).json()
    assert [child["id"] for child in role_detail["groups"]] == [group["id"]]
    user_detail = client.get(f"/api/users/{alice['id']}", headers=h).json()
    assert user_detail["groups"] == ["staff"]

    removed = client.delete(f"/api/groups/{group['id']}/users/{alice['id']}", headers=h)
    assert removed.status_code == 200
    again = client.post("/api/groups", json={"name": "dev"}, headers=alice["headers"])
    assert again.status_code == 403


def test_duplicate_membership_is_conflict(client, admin, alice) -> None:
    h = admin["headers"]
    group = client.post("/api/groups", json={"name": "staff"}, headers=h).json()
    url = f"/api/groups/{group['id']}/users"

    assert client.post(url, json={"user_id": alice["id"]}, headers=h).status_code == 201
    response = client.post(url, json={"user_id": alice["id"]}, headers=h)

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_ASSOCIATION"


def test_not_found_and_validation(client, admin) -> None:
    h = admin["headers"]

    missing = client.get("/api/groups/999", headers=h)
    assert missing.status_code == 404
    assert missing.json()["error"]["message"] == "Group not found"

    blank = client.post("/api/roles", json={"name": "   "}, headers=h)
    assert blank.status_code == 400
    assert blank.json()["error"]["code"] == "VALIDATION_ERROR"

    malformed = client.post("/api/roles", json={}, headers=h)
    assert malformed.status_code == 422


def test_soft_delete_hides_from_list_but_not_from_get(client, admin) -> None:
    h = admin["headers"]
    group = client.post("/api/groups", json={"name": "temp"}, headers=h).json()

    assert client.delete(f"/api/groups/{group['id']}", headers=h).status_code == 200

    assert client.get("/api/groups", headers=h).json() == []
    assert client.get(f"/api/groups/{group['id']}", headers=h).status_code == 200
    assert client.delete(f"/api/groups/{group['id']}", headers=h).status_code == 404


def test_bulk_grant_route(client, admin) -> None:
    h = admin["headers"]
    module = client.post("/api/modules", json={"name": "reports"}, headers=h).json()
    permission = client.post(
        "/api/permissions", json={"module_id": module["id"], "action": "export"}, headers=h
    ).json()
    roles = [client.post("/api/roles", json={"name": n}, headers=h).json() for n in ["a", "b"]]

    response = client.post(
        f"/api/permissions/{permission['id']}/roles",
        json={"role_ids": [role["id"] for role in roles]},
        headers=h,
    )

    assert response.status_code == 201
    for role in roles:
        listed = client.get(f"/api/roles/{role['id']}/permissions", headers=h).json()
        assert [item["id"] for item in listed] == [permission["id"]]


def test_deleted_user_token_is_rejected(client, admin, alice) -> None:
    assert client.delete(f"/api/users/{alice['id']}", headers=admin["headers"]).status_code == 200

    response = client.get("/api/auth/me", headers=alice["headers"])

    assert response.status_code == 401


def test_update_without_fields_is_rejected(client, admin) -> None:
    h = admin["headers"]
    group = client.post("/api/groups", json={"name": "ops"}, headers=h).json()

    response = client.put(f"/api/groups/{group['id']}", json={}, headers=h)

    assert response.status_code == 400
    assert response.json()["error"] == {
        "code": "VALIDATION_ERROR",
        "message": "No updates provided",
        "details": None,
    }


def test_store_failure_is_opaque(client, admin, store, monkeypatch, caplog) -> None:
    async def _fail(*args, **kwargs):
        raise OperationalError("SELECT * FROM secret_table", {}, Exception("db down at 10.0.0.5"))

    monkeypatch.setattr(store.groups, "list_with_roles", _fail)

    with caplog.at_level(logging.ERROR, logger="permgate"):
        response = client.get("/api/groups", headers=admin["headers"])

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "STORE_ERROR"
    assert response.json()["error"]["details"] is None
    assert "secret_table" not in response.text
    assert "10.0.0.5" not in response.text
    assert any(record.exc_info for record in caplog.records if "STORE_ERROR" in record.getMessage())


def test_unmapped_constraint_violation_is_conflict(client, admin, store, monkeypatch) -> None:
    async def _fail(*args, **kwargs):
        raise IntegrityError(
            "INSERT INTO secret_table", {}, Exception("duplicate key on 10.0.0.5")
        )

    monkeypatch.setattr(store.groups, "create", _fail)

    response = client.post("/api/groups", json={"name": "ops"}, headers=admin["headers"])

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT_ERROR"
    assert response.json()["error"]["details"] is None
    assert "secret_table" not in response.text
    assert "10.0.0.5" not in response.text
