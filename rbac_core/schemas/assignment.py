"""Assignment schemas."""

from __future__ import annotations

from uuid import UUID

from rbac_core.schemas.common import RBACModel


class RolePermissionAssignment(RBACModel):
    role_id: UUID
    permission_id: UUID


class UserRoleAssignment(RBACModel):
    user_id: UUID
    role_id: UUID
