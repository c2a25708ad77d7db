from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError

from rbac_core.core.config import RBAC_ENDPOINTS, RBACOptions


def test_missing_token_is_unauthorized(client) -> None:
    response = client.get("/rbac/list-permissions")

    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"


def test_unknown_token_is_unauthorized(client) -> None:
    response = client.get("/rbac/list-permissions", headers={"Authorization": "Bearer not-a-session"})

    assert response.status_code == 401


def test_expired_session_is_unauthorized(client, make_user) -> None:
    expired = make_user("late@example.com", role="admin", expires_in=timedelta(minutes=-5))

    response = client.get("/rbac/list-permissions", headers=expired.headers)
    assert response.status_code == 401


def test_has_permission_still_needs_a_session(client) -> None:
    response = client.post("/rbac/has-permission", json={"permissionKey": "post:read"})

    assert response.status_code == 401


def test_non_admin_is_forbidden(client, member) -> None:
    response = client.get("/rbac/list-roles", headers=member.headers)

    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"


def test_admin_tag_among_several_roles(client, make_user) -> None:
    multi = make_user("multi@example.com", role="user, admin ,editor")

    response = client.get("/rbac/list-roles", headers=multi.headers)
    assert response.status_code == 200


def test_admin_tag_is_matched_exactly(client, make_user) -> None:
    lookalike = make_user("almost@example.com", role="administrator,superadmin")

    response = client.get("/rbac/list-roles", headers=lookalike.headers)
    assert response.status_code == 403


def test_user_without_role_tags_is_forbidden(client, make_user) -> None:
    plain = make_user("plain@example.com", role=None)

    response = client.get("/rbac/list-roles", headers=plain.headers)
    assert response.status_code == 403


def test_configurable_admin_role(make_client, make_user) -> None:
    rbac_client = make_client(admin_role="superuser")
    superuser = make_user("root@example.com", role="superuser")
    admin = make_user("admin@example.com", role="admin")

    assert rbac_client.get("/rbac/list-roles", headers=superuser.headers).status_code == 200
    assert rbac_client.get("/rbac/list-roles", headers=admin.headers).status_code == 403


def test_disabled_endpoint_answers_not_found_before_auth(make_client, admin) -> None:
    rbac_client = make_client(disabled_endpoints=["deletePermission", "hasPermission"])

    anonymous = rbac_client.post("/rbac/delete-permission", json={"id": "whatever"})
    assert anonymous.status_code == 404
    assert anonymous.json()["code"] == "NOT_FOUND"

    authenticated = rbac_client.post("/rbac/has-permission", json={"permissionKey": "a:b"}, headers=admin.headers)
    assert authenticated.status_code == 404

    still_enabled = rbac_client.get("/rbac/list-permissions", headers=admin.headers)
    assert still_enabled.status_code == 200


def test_disabled_endpoints_accept_comma_separated_names() -> None:
    options = RBACOptions(disabled_endpoints="createRole, deleteRole")

    assert options.is_endpoint_disabled("createRole")
    assert options.is_endpoint_disabled("deleteRole")
    assert not options.is_endpoint_disabled("listRoles")


def test_unknown_disabled_endpoint_name_is_a_config_error() -> None:
    with pytest.raises(ValidationError):
        RBACOptions(disabled_endpoints=["dropDatabase"])


def test_every_endpoint_name_is_routed(client) -> None:
    paths = set(client.app.openapi()["paths"])
    for name in RBAC_ENDPOINTS:
        kebab = "".join(f"-{char.lower()}" if char.isupper() else char for char in name)
        assert f"/rbac/{kebab}" in paths


def test_health_probes(client) -> None:
    assert client.get("/healthz").json() == {"status": "ok"}
    assert client.get("/readyz").json() == {"status": "ready"}
