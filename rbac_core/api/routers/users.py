"""User-centric role and permission endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from rbac_core.api.dependencies import (
    get_assignment_service,
    get_authorization_service,
    list_query_params,
    options_query_params,
    rbac_endpoint,
)
from rbac_core.schemas.common import ListQuery, OptionsQuery, OptionsResponse
from rbac_core.schemas.permission import PermissionResponse
from rbac_core.schemas.role import RoleResponse
from rbac_core.schemas.user import (
    SetUserRolesRequest,
    SetUserRolesResponse,
    UserPermissionsResponse,
    UserRolesResponse,
    UserSummary,
)
from rbac_core.services.assignments import AssignmentService
from rbac_core.services.authorization import AuthorizationService
from rbac_core.services.sessions import AuthSession

router = APIRouter()


@router.get("/get-user-roles", response_model=UserRolesResponse)
def get_user_roles(
    auth: AuthSession = Depends(rbac_endpoint("getUserRoles")),
    user_id: UUID = Query(..., alias="userId"),
    query: ListQuery = Depends(list_query_params),
    service: AuthorizationService = Depends(get_authorization_service),
) -> UserRolesResponse:
    user, page = service.get_user_roles(user_id, query)
    return UserRolesResponse(
        user=UserSummary.model_validate(user),
        roles=[RoleResponse.model_validate(role) for role in page.items],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


@router.get("/get-user-permissions", response_model=UserPermissionsResponse)
def get_user_permissions(
    auth: AuthSession = Depends(rbac_endpoint("getUserPermissions")),
    user_id: UUID = Query(..., alias="userId"),
    service: AuthorizationService = Depends(get_authorization_service),
) -> UserPermissionsResponse:
    permissions = service.get_user_permissions(user_id)
    return UserPermissionsResponse(
        permissions=[PermissionResponse.model_validate(item) for item in permissions],
    )


@router.post("/set-user-roles", response_model=SetUserRolesResponse)
def set_user_roles(
    payload: SetUserRolesRequest,
    auth: AuthSession = Depends(rbac_endpoint("setUserRoles")),
    service: AssignmentService = Depends(get_assignment_service),
) -> SetUserRolesResponse:
    result = service.set_user_roles(payload.user_id, payload.role_ids)
    return SetUserRolesResponse(
        success=True,
        message="User roles updated successfully",
        added=result.added,
        removed=result.removed,
        kept=result.kept,
    )


@router.get("/get-users-options", response_model=OptionsResponse)
def get_users_options(
    auth: AuthSession = Depends(rbac_endpoint("getUsersOptions")),
    query: OptionsQuery = Depends(options_query_params),
    service: AuthorizationService = Depends(get_authorization_service),
) -> OptionsResponse:
    return OptionsResponse(options=service.get_users_options(query))
