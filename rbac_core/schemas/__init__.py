"""Pydantic schemas for API payloads."""

from rbac_core.schemas.assignment import RolePermissionAssignment, UserRoleAssignment
from rbac_core.schemas.authorization import (
    HasPermissionRequest,
    PermissionCheckRequest,
    PermissionCheckResponse,
)
from rbac_core.schemas.common import (
    ListQuery,
    OptionItem,
    OptionsQuery,
    OptionsResponse,
    SuccessResponse,
)
from rbac_core.schemas.permission import (
    PermissionCreate,
    PermissionDelete,
    PermissionEnvelope,
    PermissionListResponse,
    PermissionResponse,
    PermissionUpdate,
)
from rbac_core.schemas.relations import PermissionRolesResponse, RolePermissionsResponse
from rbac_core.schemas.role import (
    RoleCreate,
    RoleDelete,
    RoleEnvelope,
    RoleListResponse,
    RoleResponse,
    RoleUpdate,
)
from rbac_core.schemas.user import (
    SetUserRolesRequest,
    SetUserRolesResponse,
    UserPermissionsResponse,
    UserRolesResponse,
    UserSummary,
)

__all__ = [
    "HasPermissionRequest",
    "ListQuery",
    "OptionItem",
    "OptionsQuery",
    "OptionsResponse",
    "PermissionCheckRequest",
    "PermissionCheckResponse",
    "PermissionCreate",
    "PermissionDelete",
    "PermissionEnvelope",
    "PermissionListResponse",
    "PermissionResponse",
    "PermissionRolesResponse",
    "PermissionUpdate",
    "RoleCreate",
    "RoleDelete",
    "RoleEnvelope",
    "RoleListResponse",
    "RolePermissionAssignment",
    "RolePermissionsResponse",
    "RoleResponse",
    "RoleUpdate",
    "SetUserRolesRequest",
    "SetUserRolesResponse",
    "SuccessResponse",
    "UserPermissionsResponse",
    "UserRoleAssignment",
    "UserRolesResponse",
    "UserSummary",
]
