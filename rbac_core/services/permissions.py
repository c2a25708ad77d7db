"""Permission management service."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rbac_core.core.config import RBACOptions
from rbac_core.models.permission import Permission
from rbac_core.models.role import Role
from rbac_core.models.role_permission import RolePermission
from rbac_core.schemas.common import ListQuery, OptionItem, OptionsQuery
from rbac_core.schemas.permission import PermissionCreate, PermissionUpdate
from rbac_core.services.assignments import ensure_roles_exist, sync_links
from rbac_core.services.cache import PermissionCache, invalidate_after_commit
from rbac_core.services.errors import BadRequestError, NotFoundError, RBACErrorCode
from rbac_core.services.listing import Page, paginate, select_options
from rbac_core.services.pagination import PaginationConfig
from rbac_core.services.validation import KeyValidationConfig, validate_key


class PermissionService:
    """CRUD for permissions plus their role assignments."""

    def __init__(self, session: Session, options: RBACOptions, cache: PermissionCache) -> None:
        self._session = session
        self._options = options
        self._cache = cache
        self._keys = KeyValidationConfig.from_options(options)
        self._pagination = PaginationConfig.from_options(options)
        self._logger = logging.getLogger("rbac_core.services.permissions")

    def list_permissions(self, query: ListQuery) -> Page[Permission]:
        return paginate(self._session, Permission, query, self._pagination)

    def get_permission(self, permission_id: UUID) -> Permission:
        permission = self._session.get(Permission, permission_id)
        if permission is None:
            raise NotFoundError(RBACErrorCode.PERMISSION_NOT_FOUND)
        return permission

    def find_permission(
        self,
        *,
        permission_id: Optional[UUID] = None,
        permission_key: Optional[str] = None,
    ) -> Permission:
        """Look a permission up by id, falling back to key."""

        permission: Optional[Permission] = None
        if permission_id is not None:
            permission = self._session.get(Permission, permission_id)
        elif permission_key:
            permission = self._session.scalar(select(Permission).where(Permission.key == permission_key))
        if permission is None:
            raise NotFoundError(RBACErrorCode.PERMISSION_NOT_FOUND)
        return permission

    def create_permission(self, payload: PermissionCreate, *, actor: str) -> Permission:
        key = validate_key("permission", payload.key, self._keys)
        if self._key_taken(key):
            raise BadRequestError(RBACErrorCode.PERMISSION_ALREADY_EXISTS)
        ensure_roles_exist(self._session, payload.role_ids)

        permission = Permission(
            name=payload.name,
            key=key,
            description=payload.description,
            is_active=payload.is_active,
            created_by=actor,
            updated_by=actor,
        )
        self._session.add(permission)
        try:
            self._session.flush()
        except IntegrityError as exc:
            self._session.rollback()
            raise BadRequestError(RBACErrorCode.PERMISSION_ALREADY_EXISTS) from exc

        for role_id in dict.fromkeys(payload.role_ids):
            self._session.add(RolePermission(role_id=role_id, permission_id=permission.id))
        self._session.flush()

        self._logger.info(
            "permission_created",
            extra={"permission_id": str(permission.id), "key": key, "actor": actor},
        )
        invalidate_after_commit(self._session, self._cache)
        return permission

    def update_permission(self, payload: PermissionUpdate, *, actor: str) -> Permission:
        updates = payload.model_dump(exclude_unset=True, exclude={"id"})

        key: Optional[str] = None
        if updates.get("key") is not None:
            key = validate_key("permission", updates["key"], self._keys)

        permission = self.get_permission(payload.id)

        if key is not None and key != permission.key and self._key_taken(key, exclude_id=permission.id):
            raise BadRequestError(RBACErrorCode.PERMISSION_ALREADY_EXISTS)

        role_ids: Optional[List[UUID]] = updates.get("role_ids")
        if role_ids is not None:
            ensure_roles_exist(self._session, role_ids)

        if updates.get("name") is not None:
            permission.name = updates["name"]
        if key is not None:
            permission.key = key
        if "description" in updates:
            permission.description = updates["description"]
        if updates.get("is_active") is not None:
            permission.is_active = updates["is_active"]
        permission.updated_by = actor

        try:
            self._session.flush()
        except IntegrityError as exc:
            self._session.rollback()
            raise BadRequestError(RBACErrorCode.PERMISSION_ALREADY_EXISTS) from exc

        if role_ids is not None:
            result = sync_links(
                self._session,
                RolePermission,
                owner_field="permission_id",
                owner_id=permission.id,
                target_field="role_id",
                target_ids=role_ids,
            )
            self._logger.info(
                "permission_roles_synced",
                extra={"permission_id": str(permission.id), "added": result.added, "removed": result.removed},
            )

        self._logger.info("permission_updated", extra={"permission_id": str(permission.id), "actor": actor})
        invalidate_after_commit(self._session, self._cache)
        return permission

    def delete_permission(self, permission_id: UUID) -> None:
        permission = self.get_permission(permission_id)

        assigned = self._session.scalar(
            select(func.count()).select_from(RolePermission).where(RolePermission.permission_id == permission.id)
        )
        if assigned and self._options.delete_behavior == "restrict":
            raise BadRequestError(RBACErrorCode.CANNOT_DELETE_ASSIGNED_PERMISSION)
        if assigned:
            self._session.execute(delete(RolePermission).where(RolePermission.permission_id == permission.id))

        self._session.delete(permission)
        self._session.flush()

        self._logger.info(
            "permission_deleted",
            extra={"permission_id": str(permission_id), "cascaded_role_links": assigned or 0},
        )
        invalidate_after_commit(self._session, self._cache)

    def get_permissions_options(self, query: OptionsQuery) -> List[OptionItem]:
        return select_options(self._session, Permission, query)

    def get_permission_roles(
        self,
        query: ListQuery,
        *,
        permission_id: Optional[UUID] = None,
        permission_key: Optional[str] = None,
    ) -> Tuple[Permission, Page[Role]]:
        """Return the permission together with the page of roles that include it."""

        permission = self.find_permission(permission_id=permission_id, permission_key=permission_key)
        role_ids = select(RolePermission.role_id).where(RolePermission.permission_id == permission.id)
        page = paginate(self._session, Role, query, self._pagination, filters=[Role.id.in_(role_ids)])
        return permission, page

    def _key_taken(self, key: str, *, exclude_id: Optional[UUID] = None) -> bool:
        stmt = select(Permission.id).where(Permission.key == key)
        if exclude_id is not None:
            stmt = stmt.where(Permission.id != exclude_id)
        return self._session.scalar(stmt) is not None
