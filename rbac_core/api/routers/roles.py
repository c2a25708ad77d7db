"""Role management endpoints."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from rbac_core.api.dependencies import (
    get_role_service,
    list_query_params,
    options_query_params,
    rbac_endpoint,
)
from rbac_core.models.role import Role
from rbac_core.schemas.common import ListQuery, OptionsQuery, OptionsResponse, SuccessResponse
from rbac_core.schemas.permission import PermissionResponse
from rbac_core.schemas.relations import RolePermissionsResponse
from rbac_core.schemas.role import (
    RoleCreate,
    RoleDelete,
    RoleEnvelope,
    RoleListResponse,
    RoleResponse,
    RoleUpdate,
)
from rbac_core.services.errors import BadRequestError, RBACErrorCode
from rbac_core.services.roles import RoleService
from rbac_core.services.sessions import AuthSession

router = APIRouter()


@router.get("/list-roles", response_model=RoleListResponse)
def list_roles(
    auth: AuthSession = Depends(rbac_endpoint("listRoles")),
    query: ListQuery = Depends(list_query_params),
    service: RoleService = Depends(get_role_service),
) -> RoleListResponse:
    page = service.list_roles(query)
    return RoleListResponse(
        roles=[_to_role_response(role) for role in page.items],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


@router.get("/get-role", response_model=RoleEnvelope)
def get_role(
    auth: AuthSession = Depends(rbac_endpoint("getRole")),
    id: UUID = Query(...),
    service: RoleService = Depends(get_role_service),
) -> RoleEnvelope:
    return RoleEnvelope(role=_to_role_response(service.get_role(id)))


@router.post("/create-role", response_model=RoleEnvelope)
def create_role(
    payload: RoleCreate,
    auth: AuthSession = Depends(rbac_endpoint("createRole")),
    service: RoleService = Depends(get_role_service),
) -> RoleEnvelope:
    role = service.create_role(payload, actor=auth.user.email)
    return RoleEnvelope(role=_to_role_response(role))


@router.post("/update-role", response_model=RoleEnvelope)
def update_role(
    payload: RoleUpdate,
    auth: AuthSession = Depends(rbac_endpoint("updateRole")),
    service: RoleService = Depends(get_role_service),
) -> RoleEnvelope:
    role = service.update_role(payload, actor=auth.user.email)
    return RoleEnvelope(role=_to_role_response(role))


@router.post("/delete-role", response_model=SuccessResponse)
def delete_role(
    payload: RoleDelete,
    auth: AuthSession = Depends(rbac_endpoint("deleteRole")),
    service: RoleService = Depends(get_role_service),
) -> SuccessResponse:
    service.delete_role(payload.id)
    return SuccessResponse(success=True, message="Role deleted successfully")


@router.get("/get-roles-options", response_model=OptionsResponse)
def get_roles_options(
    auth: AuthSession = Depends(rbac_endpoint("getRolesOptions")),
    query: OptionsQuery = Depends(options_query_params),
    service: RoleService = Depends(get_role_service),
) -> OptionsResponse:
    return OptionsResponse(options=service.get_roles_options(query))


@router.get("/get-role-permissions", response_model=RolePermissionsResponse)
def get_role_permissions(
    auth: AuthSession = Depends(rbac_endpoint("getRolePermissions")),
    role_id: Optional[UUID] = Query(default=None, alias="roleId"),
    role_key: Optional[str] = Query(default=None, alias="roleKey"),
    query: ListQuery = Depends(list_query_params),
    service: RoleService = Depends(get_role_service),
) -> RolePermissionsResponse:
    if role_id is None and not role_key:
        raise BadRequestError(RBACErrorCode.INVALID_REQUEST, "Either roleId or roleKey is required")

    role, page = service.get_role_permissions(query, role_id=role_id, role_key=role_key)
    return RolePermissionsResponse(
        role=_to_role_response(role),
        permissions=[PermissionResponse.model_validate(item) for item in page.items],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


def _to_role_response(role: Role) -> RoleResponse:
    return RoleResponse.model_validate(role)
