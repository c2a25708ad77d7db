"""Permission check schemas."""

from __future__ import annotations

from uuid import UUID

from pydantic import Field

from rbac_core.schemas.common import RBACModel


class PermissionCheckRequest(RBACModel):
    user_id: UUID
    permission_key: str = Field(..., min_length=1)


class HasPermissionRequest(RBACModel):
    permission_key: str = Field(..., min_length=1)


class PermissionCheckResponse(RBACModel):
    has_permission: bool
