"""Role management service."""

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
from rbac_core.models.user_role import UserRole
from rbac_core.schemas.common import ListQuery, OptionItem, OptionsQuery
from rbac_core.schemas.role import RoleCreate, RoleUpdate
from rbac_core.services.assignments import ensure_permissions_exist, sync_links
from rbac_core.services.cache import PermissionCache, invalidate_after_commit
from rbac_core.services.errors import BadRequestError, NotFoundError, RBACErrorCode
from rbac_core.services.listing import Page, paginate, select_options
from rbac_core.services.pagination import PaginationConfig
from rbac_core.services.validation import KeyValidationConfig, validate_key


class RoleService:
    """CRUD for roles plus the permissions they bundle."""

    def __init__(self, session: Session, options: RBACOptions, cache: PermissionCache) -> None:
        self._session = session
        self._options = options
        self._cache = cache
        self._keys = KeyValidationConfig.from_options(options)
        self._pagination = PaginationConfig.from_options(options)
        self._logger = logging.getLogger("rbac_core.services.roles")

    def list_roles(self, query: ListQuery) -> Page[Role]:
        return paginate(self._session, Role, query, self._pagination)

    def get_role(self, role_id: UUID) -> Role:
        role = self._session.get(Role, role_id)
        if role is None:
            raise NotFoundError(RBACErrorCode.ROLE_NOT_FOUND)
        return role

    def find_role(self, *, role_id: Optional[UUID] = None, role_key: Optional[str] = None) -> Role:
        role: Optional[Role] = None
        if role_id is not None:
            role = self._session.get(Role, role_id)
        elif role_key:
            role = self._session.scalar(select(Role).where(Role.key == role_key))
        if role is None:
            raise NotFoundError(RBACErrorCode.ROLE_NOT_FOUND)
        return role

    def create_role(self, payload: RoleCreate, *, actor: str) -> Role:
        key = validate_key("role", payload.key, self._keys)
        if self._key_taken(key):
            raise BadRequestError(RBACErrorCode.ROLE_ALREADY_EXISTS)
        ensure_permissions_exist(self._session, payload.permission_ids)

        role = Role(
            name=payload.name,
            key=key,
            description=payload.description,
            is_active=payload.is_active,
            created_by=actor,
            updated_by=actor,
        )
        self._session.add(role)
        try:
            self._session.flush()
        except IntegrityError as exc:
            self._session.rollback()
            raise BadRequestError(RBACErrorCode.ROLE_ALREADY_EXISTS) from exc

        for permission_id in dict.fromkeys(payload.permission_ids):
            self._session.add(RolePermission(role_id=role.id, permission_id=permission_id))
        self._session.flush()

        self._logger.info("role_created", extra={"role_id": str(role.id), "key": key, "actor": actor})
        invalidate_after_commit(self._session, self._cache)
        return role

    def update_role(self, payload: RoleUpdate, *, actor: str) -> Role:
        updates = payload.model_dump(exclude_unset=True, exclude={"id"})

        key: Optional[str] = None
        if updates.get("key") is not None:
            key = validate_key("role", updates["key"], self._keys)

        role = self.get_role(payload.id)

        if key is not None and key != role.key and self._key_taken(key, exclude_id=role.id):
            raise BadRequestError(RBACErrorCode.ROLE_ALREADY_EXISTS)

        permission_ids: Optional[List[UUID]] = updates.get("permission_ids")
        if permission_ids is not None:
            ensure_permissions_exist(self._session, permission_ids)

        if updates.get("name") is not None:
            role.name = updates["name"]
        if key is not None:
            role.key = key
        if "description" in updates:
            role.description = updates["description"]
        if updates.get("is_active") is not None:
            role.is_active = updates["is_active"]
        role.updated_by = actor

        try:
            self._session.flush()
        except IntegrityError as exc:
            self._session.rollback()
            raise BadRequestError(RBACErrorCode.ROLE_ALREADY_EXISTS) from exc

        if permission_ids is not None:
            result = sync_links(
                self._session,
                RolePermission,
                owner_field="role_id",
                owner_id=role.id,
                target_field="permission_id",
                target_ids=permission_ids,
            )
            self._logger.info(
                "role_permissions_synced",
                extra={"role_id": str(role.id), "added": result.added, "removed": result.removed},
            )

        self._logger.info("role_updated", extra={"role_id": str(role.id), "actor": actor})
        invalidate_after_commit(self._session, self._cache)
        return role

    def delete_role(self, role_id: UUID) -> None:
        """Delete a role and the permission links it owns.

        Users still holding the role block the deletion unless the configured
        delete behavior is ``cascade``, which removes their assignments too.
        """

        role = self.get_role(role_id)

        holders = self._session.scalar(
            select(func.count()).select_from(UserRole).where(UserRole.role_id == role.id)
        )
        if holders and self._options.delete_behavior == "restrict":
            raise BadRequestError(RBACErrorCode.CANNOT_DELETE_ASSIGNED_ROLE)
        if holders:
            self._session.execute(delete(UserRole).where(UserRole.role_id == role.id))
        self._session.execute(delete(RolePermission).where(RolePermission.role_id == role.id))

        self._session.delete(role)
        self._session.flush()

        self._logger.info("role_deleted", extra={"role_id": str(role_id), "cascaded_user_links": holders or 0})
        invalidate_after_commit(self._session, self._cache)

    def get_roles_options(self, query: OptionsQuery) -> List[OptionItem]:
        return select_options(self._session, Role, query)

    def get_role_permissions(
        self,
        query: ListQuery,
        *,
        role_id: Optional[UUID] = None,
        role_key: Optional[str] = None,
    ) -> Tuple[Role, Page[Permission]]:
        role = self.find_role(role_id=role_id, role_key=role_key)
        permission_ids = select(RolePermission.permission_id).where(RolePermission.role_id == role.id)
        page = paginate(
            self._session,
            Permission,
            query,
            self._pagination,
            filters=[Permission.id.in_(permission_ids)],
        )
        return role, page

    def _key_taken(self, key: str, *, exclude_id: Optional[UUID] = None) -> bool:
        stmt = select(Role.id).where(Role.key == key)
        if exclude_id is not None:
            stmt = stmt.where(Role.id != exclude_id)
        return self._session.scalar(stmt) is not None
