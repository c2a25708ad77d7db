from __future__ import annotations

from uuid import uuid4

from sqlalchemy import func, select

from rbac_core.core.database import session_scope
from rbac_core.models import RolePermission, UserRole


def _count(model) -> int:
    with session_scope() as session:
        return session.scalar(select(func.count()).select_from(model))


def test_assign_permission_to_role_is_idempotent(api) -> None:
    role = api.create_role("editor")
    permission = api.create_permission("post:write")
    payload = {"roleId": role["id"], "permissionId": permission["id"]}

    first = api.post("assign-permission-to-role", payload)
    second = api.post("assign-permission-to-role", payload)

    assert first.status_code == 200
    assert first.json() == {"success": True, "message": "Permission assigned to role successfully"}
    assert second.status_code == 200
    assert second.json() == {"success": True, "message": "Permission already assigned to role"}
    assert _count(RolePermission) == 1


def test_assign_permission_to_role_checks_both_sides(api) -> None:
    role = api.create_role("editor")
    permission = api.create_permission("post:write")

    missing_role = api.post("assign-permission-to-role", {"roleId": str(uuid4()), "permissionId": permission["id"]})
    assert missing_role.status_code == 404
    assert missing_role.json()["code"] == "ROLE_NOT_FOUND"

    missing_permission = api.post("assign-permission-to-role", {"roleId": role["id"], "permissionId": str(uuid4())})
    assert missing_permission.status_code == 404
    assert missing_permission.json()["code"] == "PERMISSION_NOT_FOUND"


def test_remove_permission_from_role(api) -> None:
    permission = api.create_permission("post:write")
    role = api.create_role("editor", permissionIds=[permission["id"]])
    payload = {"roleId": role["id"], "permissionId": permission["id"]}

    removed = api.post("remove-permission-from-role", payload)
    assert removed.json() == {"success": True, "message": "Permission removed from role successfully"}
    assert _count(RolePermission) == 0

    again = api.post("remove-permission-from-role", payload)
    assert again.status_code == 200
    assert again.json()["success"] is True


def test_remove_nonexistent_pair_succeeds(api) -> None:
    response = api.post("remove-permission-from-role", {"roleId": str(uuid4()), "permissionId": str(uuid4())})

    assert response.status_code == 200
    assert response.json()["success"] is True


def test_assign_role_to_user_is_idempotent(api, member) -> None:
    role = api.create_role("editor")
    payload = {"userId": str(member.id), "roleId": role["id"]}

    first = api.post("assign-role-to-user", payload)
    second = api.post("assign-role-to-user", payload)

    assert first.json() == {"success": True, "message": "Role assigned to user successfully"}
    assert second.json() == {"success": True, "message": "Role already assigned to user"}
    assert _count(UserRole) == 1


def test_assign_role_to_unknown_user_or_role(api, member) -> None:
    role = api.create_role("editor")

    unknown_user = api.post("assign-role-to-user", {"userId": str(uuid4()), "roleId": role["id"]})
    assert unknown_user.status_code == 404
    assert unknown_user.json()["code"] == "USER_NOT_FOUND"

    unknown_role = api.post("assign-role-to-user", {"userId": str(member.id), "roleId": str(uuid4())})
    assert unknown_role.status_code == 404
    assert unknown_role.json()["code"] == "ROLE_NOT_FOUND"


def test_remove_role_from_user(api, member) -> None:
    role = api.create_role("editor")
    payload = {"userId": str(member.id), "roleId": role["id"]}
    api.post("assign-role-to-user", payload)

    removed = api.post("remove-role-from-user", payload)
    assert removed.json() == {"success": True, "message": "Role removed from user successfully"}
    assert _count(UserRole) == 0

    again = api.post("remove-role-from-user", payload)
    assert again.status_code == 200


def test_assignment_payload_requires_uuids(api) -> None:
    response = api.post("assign-role-to-user", {"userId": "not-a-uuid", "roleId": str(uuid4())})

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REQUEST"
