from __future__ import annotations

from uuid import uuid4


def test_create_permission_records_actor_and_defaults(api, admin) -> None:
    permission = api.create_permission("user:read", name="Read users", description="List and view users")

    assert permission["key"] == "user:read"
    assert permission["name"] == "Read users"
    assert permission["isActive"] is True
    assert permission["createdBy"] == admin.email
    assert permission["updatedBy"] == admin.email


def test_create_permission_stores_trimmed_key(api) -> None:
    permission = api.create_permission("  report:export ")
    assert permission["key"] == "report:export"


def test_duplicate_permission_key_is_rejected_and_original_untouched(api) -> None:
    original = api.create_permission("post:write", name="Write posts")

    duplicate = api.post("create-permission", {"name": "Other", "key": "post:write"})
    assert duplicate.status_code == 400
    assert duplicate.json()["code"] == "PERMISSION_ALREADY_EXISTS"

    fetched = api.get("get-permission", id=original["id"])
    assert fetched.status_code == 200
    assert fetched.json()["permission"]["name"] == "Write posts"

    listing = api.get("list-permissions")
    assert listing.json()["total"] == 1


def test_create_permission_rejects_invalid_key(api) -> None:
    response = api.post("create-permission", {"name": "Bad", "key": "user.read"})

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "INVALID_PERMISSION_KEY_FORMAT"
    assert "feature:action" in body["detail"]


def test_create_permission_with_missing_role_creates_nothing(api) -> None:
    missing_role = str(uuid4())
    response = api.post(
        "create-permission",
        {"name": "Delete users", "key": "user:delete", "roleIds": [missing_role]},
    )

    assert response.status_code == 404
    assert response.json()["code"] == "ROLE_NOT_FOUND"
    assert missing_role in response.json()["detail"]
    assert api.get("list-permissions").json()["total"] == 0


def test_create_permission_with_roles_links_them(api) -> None:
    editor = api.create_role("editor")
    viewer = api.create_role("viewer")

    permission = api.create_permission("post:read", roleIds=[editor["id"], viewer["id"], editor["id"]])

    assert api.permission_role_ids(permission["id"]) == {editor["id"], viewer["id"]}


def test_get_missing_permission_returns_not_found(api) -> None:
    response = api.get("get-permission", id=str(uuid4()))

    assert response.status_code == 404
    assert response.json()["code"] == "PERMISSION_NOT_FOUND"


def test_update_permission_changes_only_provided_fields(api) -> None:
    permission = api.create_permission("user:update", name="Update users", description="Edit profiles")

    response = api.post("update-permission", {"id": permission["id"], "name": "Edit users"})
    assert response.status_code == 200
    updated = response.json()["permission"]

    assert updated["name"] == "Edit users"
    assert updated["key"] == "user:update"
    assert updated["description"] == "Edit profiles"
    assert updated["isActive"] is True


def test_update_permission_can_deactivate_and_clear_description(api) -> None:
    permission = api.create_permission("user:ban", description="Ban users")

    response = api.post("update-permission", {"id": permission["id"], "isActive": False, "description": None})
    updated = response.json()["permission"]

    assert updated["isActive"] is False
    assert updated["description"] is None


def test_update_permission_key_collision_with_other_row(api) -> None:
    api.create_permission("user:read")
    other = api.create_permission("user:list")

    collision = api.post("update-permission", {"id": other["id"], "key": "user:read"})
    assert collision.status_code == 400
    assert collision.json()["code"] == "PERMISSION_ALREADY_EXISTS"

    same_key = api.post("update-permission", {"id": other["id"], "key": "user:list", "name": "List"})
    assert same_key.status_code == 200


def test_update_permission_validates_new_key(api) -> None:
    permission = api.create_permission("user:read")

    response = api.post("update-permission", {"id": permission["id"], "key": "x"})
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_PERMISSION_KEY_LENGTH"


def test_update_missing_permission_returns_not_found(api) -> None:
    response = api.post("update-permission", {"id": str(uuid4()), "name": "Ghost"})

    assert response.status_code == 404
    assert response.json()["code"] == "PERMISSION_NOT_FOUND"


def test_update_permission_with_empty_role_ids_clears_all_assignments(api) -> None:
    roles = [api.create_role(key) for key in ("alpha", "beta", "gamma")]
    permission = api.create_permission("doc:read", roleIds=[role["id"] for role in roles])
    assert len(api.permission_role_ids(permission["id"])) == 3

    response = api.post("update-permission", {"id": permission["id"], "roleIds": []})
    assert response.status_code == 200

    assert api.permission_role_ids(permission["id"]) == set()
    for role in roles:
        assert api.role_permission_ids(role["id"]) == set()


def test_update_permission_without_role_ids_leaves_assignments(api) -> None:
    role = api.create_role("auditor")
    permission = api.create_permission("log:read", roleIds=[role["id"]])

    api.post("update-permission", {"id": permission["id"], "name": "Read logs"})

    assert api.permission_role_ids(permission["id"]) == {role["id"]}


def test_update_permission_role_sync_with_missing_role_changes_nothing(api) -> None:
    role = api.create_role("auditor")
    permission = api.create_permission("log:read", name="Logs", roleIds=[role["id"]])

    response = api.post(
        "update-permission",
        {"id": permission["id"], "name": "Renamed", "roleIds": [str(uuid4())]},
    )
    assert response.status_code == 404

    fetched = api.get("get-permission", id=permission["id"]).json()["permission"]
    assert fetched["name"] == "Logs"
    assert api.permission_role_ids(permission["id"]) == {role["id"]}


def test_delete_unassigned_permission(api) -> None:
    permission = api.create_permission("tmp:thing")

    response = api.post("delete-permission", {"id": permission["id"]})
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Permission deleted successfully"}

    assert api.get("get-permission", id=permission["id"]).status_code == 404


def test_delete_missing_permission_returns_not_found(api) -> None:
    response = api.post("delete-permission", {"id": str(uuid4())})

    assert response.status_code == 404
    assert response.json()["code"] == "PERMISSION_NOT_FOUND"


def test_list_permissions_search_and_sort(api) -> None:
    api.create_permission("user:read", name="Read Users")
    api.create_permission("user:write", name="Write Users")
    api.create_permission("post:read", name="Read Posts")

    contains = api.get("list-permissions", searchValue="read").json()
    assert contains["total"] == 2

    starts = api.get("list-permissions", searchValue="write", searchOperator="starts_with").json()
    assert [item["key"] for item in starts["permissions"]] == ["user:write"]

    ends = api.get(
        "list-permissions",
        searchValue=":read",
        searchField="key",
        searchOperator="ends_with",
        sortBy="key",
    ).json()
    assert [item["key"] for item in ends["permissions"]] == ["post:read", "user:read"]

    ordered = api.get("list-permissions", sortBy="key", sortDirection="desc").json()
    assert [item["key"] for item in ordered["permissions"]] == ["user:write", "user:read", "post:read"]


def test_list_permissions_search_treats_wildcards_literally(api) -> None:
    api.create_permission("user:read", name="Read Users")

    response = api.get("list-permissions", searchValue="%")
    assert response.json()["total"] == 0


def test_list_permissions_pagination_reports_effective_values(api) -> None:
    for index in range(12):
        api.create_permission(f"feature{index:02d}:read")

    first_page = api.get("list-permissions", sortBy="key").json()
    assert first_page["total"] == 12
    assert first_page["limit"] == 10
    assert first_page["offset"] == 0
    assert len(first_page["permissions"]) == 10

    second_page = api.get("list-permissions", sortBy="key", limit=5, offset=10).json()
    assert [item["key"] for item in second_page["permissions"]] == ["feature10:read", "feature11:read"]
    assert second_page["limit"] == 5
    assert second_page["offset"] == 10

    clamped = api.get("list-permissions", limit=500).json()
    assert clamped["limit"] == 100
    assert len(clamped["permissions"]) == 12

    junk = api.get("list-permissions", limit="abc", offset="xyz").json()
    assert junk["limit"] == 10
    assert junk["offset"] == 0


def test_list_permissions_rejects_unknown_sort_field(api) -> None:
    response = api.get("list-permissions", sortBy="password")

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_SORT_FIELD"


def test_list_permissions_rejects_unknown_search_operator(api) -> None:
    response = api.get("list-permissions", searchValue="x", searchOperator="regex")

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "INVALID_REQUEST"
    assert body["errors"]


def test_permission_options_filter_and_sort(api) -> None:
    api.create_permission("user:write", name="Write Users")
    api.create_permission("user:read", name="Read Users")
    api.create_permission("user:purge", name="Purge Users", isActive=False)

    active = api.get("get-permissions-options").json()["options"]
    assert [option["label"] for option in active] == ["Read Users", "Write Users"]
    assert all(set(option) == {"value", "label"} for option in active)

    everything = api.get("get-permissions-options", onlyActive="false").json()["options"]
    assert [option["label"] for option in everything] == ["Purge Users", "Read Users", "Write Users"]

    searched = api.get("get-permissions-options", search="WRITE").json()["options"]
    assert [option["label"] for option in searched] == ["Write Users"]

    limited = api.get("get-permissions-options", onlyActive="false", limit=2).json()["options"]
    assert len(limited) == 2


def test_get_permission_roles_by_key(api) -> None:
    editor = api.create_role("editor", name="Editor")
    admin_role = api.create_role("admin_role", name="Administrator")
    api.create_role("viewer", name="Viewer")
    permission = api.create_permission("post:publish", roleIds=[editor["id"], admin_role["id"]])

    response = api.get("get-permission-roles", permissionKey="post:publish", sortBy="name")
    assert response.status_code == 200
    body = response.json()
    assert body["permission"]["id"] == permission["id"]
    assert [role["name"] for role in body["roles"]] == ["Administrator", "Editor"]
    assert body["total"] == 2

    searched = api.get("get-permission-roles", permissionId=permission["id"], searchValue="edit").json()
    assert [role["key"] for role in searched["roles"]] == ["editor"]


def test_get_permission_roles_requires_an_identifier(api) -> None:
    response = api.get("get-permission-roles")

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REQUEST"


def test_get_permission_roles_for_unknown_key(api) -> None:
    response = api.get("get-permission-roles", permissionKey="nope:nope")

    assert response.status_code == 404
    assert response.json()["code"] == "PERMISSION_NOT_FOUND"


def test_create_permission_body_validation_error(api) -> None:
    response = api.post("create-permission", {"key": "user:read"})

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "INVALID_REQUEST"
    assert any(error["loc"][-1] == "name" for error in body["errors"])
