from __future__ import annotations

from sqlalchemy import func, select

from rbac_core.core.database import session_scope
from rbac_core.models import RolePermission, UserRole


def _count(model) -> int:
    with session_scope() as session:
        return session.scalar(select(func.count()).select_from(model))


def test_restrict_blocks_deleting_assigned_permission(api) -> None:
    permission = api.create_permission("post:read")
    api.create_role("reader", permissionIds=[permission["id"]])

    response = api.post("delete-permission", {"id": permission["id"]})

    assert response.status_code == 400
    assert response.json()["code"] == "CANNOT_DELETE_ASSIGNED_PERMISSION"
    assert api.get("get-permission", id=permission["id"]).status_code == 200
    assert _count(RolePermission) == 1


def test_restrict_blocks_deleting_role_held_by_users(api, member) -> None:
    role = api.create_role("reader")
    api.post("assign-role-to-user", {"userId": str(member.id), "roleId": role["id"]})

    response = api.post("delete-role", {"id": role["id"]})

    assert response.status_code == 400
    assert response.json()["code"] == "CANNOT_DELETE_ASSIGNED_ROLE"
    assert _count(UserRole) == 1


def test_cascade_deletes_permission_with_its_links(make_client, admin, api_for) -> None:
    api = api_for(make_client(delete_behavior="cascade"), admin.headers)
    permission = api.create_permission("post:read")
    keep = api.create_permission("post:write")
    role = api.create_role("reader", permissionIds=[permission["id"], keep["id"]])

    response = api.post("delete-permission", {"id": permission["id"]})

    assert response.status_code == 200
    assert api.role_permission_ids(role["id"]) == {keep["id"]}


def test_cascade_deletes_role_with_user_and_permission_links(make_client, admin, member, api_for) -> None:
    api = api_for(make_client(delete_behavior="cascade"), admin.headers)
    permission = api.create_permission("post:read")
    role = api.create_role("reader", permissionIds=[permission["id"]])
    api.post("assign-role-to-user", {"userId": str(member.id), "roleId": role["id"]})

    response = api.post("delete-role", {"id": role["id"]})

    assert response.status_code == 200
    assert _count(UserRole) == 0
    assert _count(RolePermission) == 0
    assert api.get("get-permission", id=permission["id"]).status_code == 200
