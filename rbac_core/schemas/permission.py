"""Permission schemas."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import Field

from rbac_core.schemas.common import KeyedEntityResponse, RBACModel


class PermissionCreate(RBACModel):
    name: str = Field(..., min_length=1, max_length=255)
    key: str = Field(..., description="Unique key, e.g. user:read.")
    description: Optional[str] = Field(default=None, max_length=1024)
    is_active: bool = True
    role_ids: List[UUID] = Field(default_factory=list, description="Roles to grant the permission to.")


class PermissionUpdate(RBACModel):
    id: UUID
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    key: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=1024)
    is_active: Optional[bool] = None
    role_ids: Optional[List[UUID]] = Field(
        default=None,
        description="Replaces the current role assignments; omit to leave them untouched.",
    )


class PermissionDelete(RBACModel):
    id: UUID


class PermissionResponse(KeyedEntityResponse):
    pass


class PermissionEnvelope(RBACModel):
    permission: PermissionResponse


class PermissionListResponse(RBACModel):
    permissions: List[PermissionResponse]
    total: int
    limit: int
    offset: int
