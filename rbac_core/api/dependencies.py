"""Dependency injection helpers for FastAPI routes."""

from __future__ import annotations

from typing import Callable, Iterator, Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from rbac_core.core.config import RBACEndpoint, RBACOptions
from rbac_core.core.database import get_session
from rbac_core.schemas.common import ListQuery, OptionsQuery, SearchField, SearchOperator, SortDirection
from rbac_core.services.assignments import AssignmentService
from rbac_core.services.authorization import AuthorizationService
from rbac_core.services.cache import PermissionCache
from rbac_core.services.errors import NotFoundError
from rbac_core.services.permissions import PermissionService
from rbac_core.services.roles import RoleService
from rbac_core.services.sessions import AuthSession, SessionResolver, ensure_user_is_admin

_bearer = HTTPBearer(auto_error=False)


def get_db_session() -> Iterator[Session]:
    yield from get_session()


def get_rbac_options(request: Request) -> RBACOptions:
    return request.app.state.rbac_options


def get_permission_cache(request: Request) -> PermissionCache:
    return request.app.state.permission_cache


def rbac_endpoint(name: RBACEndpoint, *, admin: bool = True) -> Callable[..., AuthSession]:
    """Build the guard every RBAC route runs first.

    A disabled endpoint answers 404 before anything else. Otherwise the
    bearer token must resolve to a live session, and unless ``admin`` is
    False the session user must carry the configured admin role.
    """

    def guard(
        options: RBACOptions = Depends(get_rbac_options),
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
        session: Session = Depends(get_db_session),
    ) -> AuthSession:
        if options.is_endpoint_disabled(name):
            raise NotFoundError()
        token = credentials.credentials if credentials else None
        auth_session = SessionResolver(session).require(token)
        if admin:
            ensure_user_is_admin(auth_session, options.admin_role)
        return auth_session

    return guard


def get_permission_service(
    session: Session = Depends(get_db_session),
    options: RBACOptions = Depends(get_rbac_options),
    cache: PermissionCache = Depends(get_permission_cache),
) -> PermissionService:
    return PermissionService(session, options, cache)


def get_role_service(
    session: Session = Depends(get_db_session),
    options: RBACOptions = Depends(get_rbac_options),
    cache: PermissionCache = Depends(get_permission_cache),
) -> RoleService:
    return RoleService(session, options, cache)


def get_assignment_service(
    session: Session = Depends(get_db_session),
    cache: PermissionCache = Depends(get_permission_cache),
) -> AssignmentService:
    return AssignmentService(session, cache)


def get_authorization_service(
    session: Session = Depends(get_db_session),
    options: RBACOptions = Depends(get_rbac_options),
    cache: PermissionCache = Depends(get_permission_cache),
) -> AuthorizationService:
    return AuthorizationService(session, options, cache)


def list_query_params(
    search_value: Optional[str] = Query(default=None, alias="searchValue"),
    search_field: SearchField = Query(default="name", alias="searchField"),
    search_operator: SearchOperator = Query(default="contains", alias="searchOperator"),
    limit: Optional[str] = Query(default=None),
    offset: Optional[str] = Query(default=None),
    sort_by: Optional[str] = Query(default=None, alias="sortBy"),
    sort_direction: SortDirection = Query(default="asc", alias="sortDirection"),
) -> ListQuery:
    # limit/offset stay raw strings; pagination falls back to defaults on junk.
    return ListQuery(
        search_value=search_value,
        search_field=search_field,
        search_operator=search_operator,
        limit=limit,
        offset=offset,
        sort_by=sort_by,
        sort_direction=sort_direction,
    )


def options_query_params(
    only_active: bool = Query(default=True, alias="onlyActive"),
    search: Optional[str] = Query(default=None),
    limit: Optional[int] = Query(default=None),
) -> OptionsQuery:
    return OptionsQuery(only_active=only_active, search=search, limit=limit)
