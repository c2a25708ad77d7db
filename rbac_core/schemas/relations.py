"""Reverse-lookup schemas joining permissions and roles."""

from __future__ import annotations

from typing import List

from rbac_core.schemas.common import RBACModel

from rbac_core.schemas.permission import PermissionResponse
from rbac_core.schemas.role import RoleResponse


class PermissionRolesResponse(RBACModel):
    permission: PermissionResponse
    roles: List[RoleResponse]
    total: int
    limit: int
    offset: int


class RolePermissionsResponse(RBACModel):
    role: RoleResponse
    permissions: List[PermissionResponse]
    total: int
    limit: int
    offset: int
