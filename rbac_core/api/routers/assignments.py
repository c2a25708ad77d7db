"""Endpoints attaching permissions to roles and roles to users."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from rbac_core.api.dependencies import get_assignment_service, rbac_endpoint
from rbac_core.schemas.assignment import RolePermissionAssignment, UserRoleAssignment
from rbac_core.schemas.common import SuccessResponse
from rbac_core.services.assignments import AssignmentService
from rbac_core.services.sessions import AuthSession

router = APIRouter()


@router.post("/assign-permission-to-role", response_model=SuccessResponse)
def assign_permission_to_role(
    payload: RolePermissionAssignment,
    auth: AuthSession = Depends(rbac_endpoint("assignPermissionToRole")),
    service: AssignmentService = Depends(get_assignment_service),
) -> SuccessResponse:
    message = service.assign_permission_to_role(payload.role_id, payload.permission_id)
    return SuccessResponse(success=True, message=message)


@router.post("/remove-permission-from-role", response_model=SuccessResponse)
def remove_permission_from_role(
    payload: RolePermissionAssignment,
    auth: AuthSession = Depends(rbac_endpoint("removePermissionFromRole")),
    service: AssignmentService = Depends(get_assignment_service),
) -> SuccessResponse:
    message = service.remove_permission_from_role(payload.role_id, payload.permission_id)
    return SuccessResponse(success=True, message=message)


@router.post("/assign-role-to-user", response_model=SuccessResponse)
def assign_role_to_user(
    payload: UserRoleAssignment,
    auth: AuthSession = Depends(rbac_endpoint("assignRoleToUser")),
    service: AssignmentService = Depends(get_assignment_service),
) -> SuccessResponse:
    message = service.assign_role_to_user(payload.user_id, payload.role_id)
    return SuccessResponse(success=True, message=message)


@router.post("/remove-role-from-user", response_model=SuccessResponse)
def remove_role_from_user(
    payload: UserRoleAssignment,
    auth: AuthSession = Depends(rbac_endpoint("removeRoleFromUser")),
    service: AssignmentService = Depends(get_assignment_service),
) -> SuccessResponse:
    message = service.remove_role_from_user(payload.user_id, payload.role_id)
    return SuccessResponse(success=True, message=message)
