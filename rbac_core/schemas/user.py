"""Schemas for the user-centric RBAC endpoints."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import ConfigDict, Field

from rbac_core.schemas.common import RBACModel
from rbac_core.schemas.permission import PermissionResponse
from rbac_core.schemas.role import RoleResponse


class UserSummary(RBACModel):
    id: UUID
    email: str
    name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class UserRolesResponse(RBACModel):
    user: UserSummary
    roles: List[RoleResponse]
    total: int
    limit: int
    offset: int


class UserPermissionsResponse(RBACModel):
    permissions: List[PermissionResponse]


class SetUserRolesRequest(RBACModel):
    user_id: UUID
    role_ids: List[UUID] = Field(default_factory=list)


class SetUserRolesResponse(RBACModel):
    success: bool
    message: str
    added: int
    removed: int
    kept: int
