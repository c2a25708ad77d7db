"""Role schemas."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import Field

from rbac_core.schemas.common import KeyedEntityResponse, RBACModel


class RoleCreate(RBACModel):
    name: str = Field(..., min_length=1, max_length=255)
    key: str = Field(..., description="Unique key, e.g. editor.")
    description: Optional[str] = Field(default=None, max_length=1024)
    is_active: bool = True
    permission_ids: List[UUID] = Field(default_factory=list, description="Permissions granted to the role.")


class RoleUpdate(RBACModel):
    id: UUID
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    key: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=1024)
    is_active: Optional[bool] = None
    permission_ids: Optional[List[UUID]] = Field(
        default=None,
        description="Replaces the current permission assignments; omit to leave them untouched.",
    )


class RoleDelete(RBACModel):
    id: UUID


class RoleResponse(KeyedEntityResponse):
    pass


class RoleEnvelope(RBACModel):
    role: RoleResponse


class RoleListResponse(RBACModel):
    roles: List[RoleResponse]
    total: int
    limit: int
    offset: int
