"""Permission management endpoints."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from rbac_core.api.dependencies import (
    get_permission_service,
    list_query_params,
    options_query_params,
    rbac_endpoint,
)
from rbac_core.schemas.common import ListQuery, OptionsQuery, OptionsResponse, SuccessResponse
from rbac_core.schemas.permission import (
    PermissionCreate,
    PermissionDelete,
    PermissionEnvelope,
    PermissionListResponse,
    PermissionResponse,
    PermissionUpdate,
)
from rbac_core.schemas.relations import PermissionRolesResponse
from rbac_core.schemas.role import RoleResponse
from rbac_core.services.errors import BadRequestError, RBACErrorCode
from rbac_core.services.permissions import PermissionService
from rbac_core.services.sessions import AuthSession

router = APIRouter()


@router.get("/list-permissions", response_model=PermissionListResponse)
def list_permissions(
    auth: AuthSession = Depends(rbac_endpoint("listPermissions")),
    query: ListQuery = Depends(list_query_params),
    service: PermissionService = Depends(get_permission_service),
) -> PermissionListResponse:
    page = service.list_permissions(query)
    return PermissionListResponse(
        permissions=[PermissionResponse.model_validate(item) for item in page.items],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


@router.get("/get-permission", response_model=PermissionEnvelope)
def get_permission(
    auth: AuthSession = Depends(rbac_endpoint("getPermission")),
    id: UUID = Query(...),
    service: PermissionService = Depends(get_permission_service),
) -> PermissionEnvelope:
    permission = service.get_permission(id)
    return PermissionEnvelope(permission=PermissionResponse.model_validate(permission))


@router.post("/create-permission", response_model=PermissionEnvelope)
def create_permission(
    payload: PermissionCreate,
    auth: AuthSession = Depends(rbac_endpoint("createPermission")),
    service: PermissionService = Depends(get_permission_service),
) -> PermissionEnvelope:
    permission = service.create_permission(payload, actor=auth.user.email)
    return PermissionEnvelope(permission=PermissionResponse.model_validate(permission))


@router.post("/update-permission", response_model=PermissionEnvelope)
def update_permission(
    payload: PermissionUpdate,
    auth: AuthSession = Depends(rbac_endpoint("updatePermission")),
    service: PermissionService = Depends(get_permission_service),
) -> PermissionEnvelope:
    permission = service.update_permission(payload, actor=auth.user.email)
    return PermissionEnvelope(permission=PermissionResponse.model_validate(permission))


@router.post("/delete-permission", response_model=SuccessResponse)
def delete_permission(
    payload: PermissionDelete,
    auth: AuthSession = Depends(rbac_endpoint("deletePermission")),
    service: PermissionService = Depends(get_permission_service),
) -> SuccessResponse:
    service.delete_permission(payload.id)
    return SuccessResponse(success=True, message="Permission deleted successfully")


@router.get("/get-permissions-options", response_model=OptionsResponse)
def get_permissions_options(
    auth: AuthSession = Depends(rbac_endpoint("getPermissionsOptions")),
    query: OptionsQuery = Depends(options_query_params),
    service: PermissionService = Depends(get_permission_service),
) -> OptionsResponse:
    return OptionsResponse(options=service.get_permissions_options(query))


@router.get("/get-permission-roles", response_model=PermissionRolesResponse)
def get_permission_roles(
    auth: AuthSession = Depends(rbac_endpoint("getPermissionRoles")),
    permission_id: Optional[UUID] = Query(default=None, alias="permissionId"),
    permission_key: Optional[str] = Query(default=None, alias="permissionKey"),
    query: ListQuery = Depends(list_query_params),
    service: PermissionService = Depends(get_permission_service),
) -> PermissionRolesResponse:
    if permission_id is None and not permission_key:
        raise BadRequestError(RBACErrorCode.INVALID_REQUEST, "Either permissionId or permissionKey is required")

    permission, page = service.get_permission_roles(
        query,
        permission_id=permission_id,
        permission_key=permission_key,
    )
    return PermissionRolesResponse(
        permission=PermissionResponse.model_validate(permission),
        roles=[RoleResponse.model_validate(role) for role in page.items],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )
