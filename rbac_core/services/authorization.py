"""Permission resolution: user -> roles -> role permissions -> permission."""

from __future__ import annotations

import logging
from typing import List, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from rbac_core.core.config import RBACOptions
from rbac_core.models.permission import Permission
from rbac_core.models.role import Role
from rbac_core.models.role_permission import RolePermission
from rbac_core.models.user import User
from rbac_core.models.user_role import UserRole
from rbac_core.schemas.common import ListQuery, OptionItem, OptionsQuery
from rbac_core.services.cache import PermissionCache, PermissionCacheKey
from rbac_core.services.errors import NotFoundError, RBACErrorCode
from rbac_core.services.listing import Page, paginate, select_user_options
from rbac_core.services.pagination import PaginationConfig


class AuthorizationService:
    """Answers whether a user holds a permission and what their grants are."""

    def __init__(self, session: Session, options: RBACOptions, cache: PermissionCache) -> None:
        self._session = session
        self._cache = cache
        self._pagination = PaginationConfig.from_options(options)
        self._logger = logging.getLogger("rbac_core.services.authorization")

    def has_permission(self, user_id: UUID, permission_key: str) -> bool:
        """Return True when some role assigned to the user includes the permission.

        An unknown permission key resolves to False rather than an error.
        Decisions are cached per ``(user_id, permission_key)``.
        """

        cache_key: PermissionCacheKey = (str(user_id), permission_key)
        cached = self._cache.get(cache_key)
        if cached is not None:
            self._logger.debug(
                "permission_cache_hit",
                extra={"user_id": str(user_id), "permission_key": permission_key, "granted": cached},
            )
            return cached

        granted = self._resolve(user_id, permission_key)
        self._cache.set(cache_key, granted)

        event = "permission_granted" if granted else "permission_denied"
        self._logger.info(event, extra={"user_id": str(user_id), "permission_key": permission_key})
        return granted

    def _resolve(self, user_id: UUID, permission_key: str) -> bool:
        permission_id = self._session.scalar(select(Permission.id).where(Permission.key == permission_key))
        if permission_id is None:
            return False

        role_ids = self._session.scalars(select(UserRole.role_id).where(UserRole.user_id == user_id))
        for role_id in role_ids:
            link = self._session.scalar(
                select(RolePermission.id).where(
                    RolePermission.role_id == role_id,
                    RolePermission.permission_id == permission_id,
                )
            )
            if link is not None:
                return True
        return False

    def get_user_roles(self, user_id: UUID, query: ListQuery) -> Tuple[User, Page[Role]]:
        user = self._require_user(user_id)
        role_ids = select(UserRole.role_id).where(UserRole.user_id == user.id)
        page = paginate(self._session, Role, query, self._pagination, filters=[Role.id.in_(role_ids)])
        return user, page

    def get_user_permissions(self, user_id: UUID) -> List[Permission]:
        user = self._require_user(user_id)
        stmt = (
            select(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .join(UserRole, UserRole.role_id == RolePermission.role_id)
            .where(UserRole.user_id == user.id)
            .distinct()
            .order_by(Permission.name.asc(), Permission.id.asc())
        )
        return list(self._session.scalars(stmt))

    def get_users_options(self, query: OptionsQuery) -> List[OptionItem]:
        return select_user_options(self._session, query)

    def _require_user(self, user_id: UUID) -> User:
        user = self._session.get(User, user_id)
        if user is None:
            raise NotFoundError(RBACErrorCode.USER_NOT_FOUND)
        return user
