"""Permission check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from rbac_core.api.dependencies import get_authorization_service, rbac_endpoint
from rbac_core.schemas.authorization import (
    HasPermissionRequest,
    PermissionCheckRequest,
    PermissionCheckResponse,
)
from rbac_core.services.authorization import AuthorizationService
from rbac_core.services.sessions import AuthSession

router = APIRouter()


@router.post("/check-permission", response_model=PermissionCheckResponse)
def check_permission(
    payload: PermissionCheckRequest,
    auth: AuthSession = Depends(rbac_endpoint("checkPermission")),
    service: AuthorizationService = Depends(get_authorization_service),
) -> PermissionCheckResponse:
    granted = service.has_permission(payload.user_id, payload.permission_key)
    return PermissionCheckResponse(has_permission=granted)


@router.post("/has-permission", response_model=PermissionCheckResponse)
def has_permission(
    payload: HasPermissionRequest,
    auth: AuthSession = Depends(rbac_endpoint("hasPermission", admin=False)),
    service: AuthorizationService = Depends(get_authorization_service),
) -> PermissionCheckResponse:
    granted = service.has_permission(auth.user.id, payload.permission_key)
    return PermissionCheckResponse(has_permission=granted)
