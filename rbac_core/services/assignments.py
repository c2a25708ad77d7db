"""Role/permission and user/role assignment logic, including set synchronization."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Type, Union
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rbac_core.models.permission import Permission
from rbac_core.models.role import Role
from rbac_core.models.role_permission import RolePermission
from rbac_core.models.user import User
from rbac_core.models.user_role import UserRole
from rbac_core.services.cache import PermissionCache, invalidate_after_commit
from rbac_core.services.errors import NotFoundError, RBACErrorCode

LinkModel = Union[Type[RolePermission], Type[UserRole]]


@dataclass(frozen=True)
class SyncResult:
    added: int
    removed: int
    kept: int


def sync_links(
    session: Session,
    link_model: LinkModel,
    *,
    owner_field: str,
    owner_id: UUID,
    target_field: str,
    target_ids: Iterable[UUID],
) -> SyncResult:
    """Make the owner's join rows point at exactly ``target_ids``.

    Rows whose target is no longer requested are deleted, missing targets are
    inserted and rows present on both sides are left alone. Both halves are
    flushed in the caller's transaction so the change commits or rolls back
    as one unit.
    """

    requested = list(dict.fromkeys(target_ids))
    wanted = set(requested)

    owner_column = getattr(link_model, owner_field)
    current = {
        getattr(row, target_field): row.id
        for row in session.scalars(select(link_model).where(owner_column == owner_id))
    }

    stale_ids = [row_id for target_id, row_id in current.items() if target_id not in wanted]
    to_add = [target_id for target_id in requested if target_id not in current]

    if stale_ids:
        session.execute(delete(link_model).where(link_model.id.in_(stale_ids)))
    for target_id in to_add:
        session.add(link_model(**{owner_field: owner_id, target_field: target_id}))
    session.flush()

    return SyncResult(added=len(to_add), removed=len(stale_ids), kept=len(requested) - len(to_add))


def _ensure_exist(
    session: Session,
    model: Union[Type[Role], Type[Permission]],
    ids: Iterable[UUID],
    code: RBACErrorCode,
    label: str,
) -> None:
    requested = list(dict.fromkeys(ids))
    if not requested:
        return
    found = set(session.scalars(select(model.id).where(model.id.in_(requested))))
    for entity_id in requested:
        if entity_id not in found:
            raise NotFoundError(code, f"{label} with id {entity_id} not found")


def ensure_roles_exist(session: Session, role_ids: Iterable[UUID]) -> None:
    _ensure_exist(session, Role, role_ids, RBACErrorCode.ROLE_NOT_FOUND, "Role")


def ensure_permissions_exist(session: Session, permission_ids: Iterable[UUID]) -> None:
    _ensure_exist(session, Permission, permission_ids, RBACErrorCode.PERMISSION_NOT_FOUND, "Permission")


class AssignmentService:
    """Attaches and detaches permissions to roles and roles to users."""

    def __init__(self, session: Session, cache: PermissionCache) -> None:
        self._session = session
        self._cache = cache
        self._logger = logging.getLogger("rbac_core.services.assignments")

    def assign_permission_to_role(self, role_id: UUID, permission_id: UUID) -> str:
        self._require(Role, role_id, RBACErrorCode.ROLE_NOT_FOUND)
        self._require(Permission, permission_id, RBACErrorCode.PERMISSION_NOT_FOUND)

        existing = self._session.scalar(
            select(RolePermission.id).where(
                RolePermission.role_id == role_id,
                RolePermission.permission_id == permission_id,
            )
        )
        if existing is not None:
            return "Permission already assigned to role"

        self._session.add(RolePermission(role_id=role_id, permission_id=permission_id))
        try:
            self._session.flush()
        except IntegrityError:
            # A concurrent request inserted the same pair first.
            self._session.rollback()
            return "Permission already assigned to role"

        self._logger.info(
            "permission_assigned_to_role",
            extra={"role_id": str(role_id), "permission_id": str(permission_id)},
        )
        invalidate_after_commit(self._session, self._cache)
        return "Permission assigned to role successfully"

    def remove_permission_from_role(self, role_id: UUID, permission_id: UUID) -> str:
        result = self._session.execute(
            delete(RolePermission).where(
                RolePermission.role_id == role_id,
                RolePermission.permission_id == permission_id,
            )
        )
        if result.rowcount:
            self._logger.info(
                "permission_removed_from_role",
                extra={"role_id": str(role_id), "permission_id": str(permission_id)},
            )
            invalidate_after_commit(self._session, self._cache)
        return "Permission removed from role successfully"

    def assign_role_to_user(self, user_id: UUID, role_id: UUID) -> str:
        self._require(User, user_id, RBACErrorCode.USER_NOT_FOUND)
        self._require(Role, role_id, RBACErrorCode.ROLE_NOT_FOUND)

        existing = self._session.scalar(
            select(UserRole.id).where(UserRole.user_id == user_id, UserRole.role_id == role_id)
        )
        if existing is not None:
            return "Role already assigned to user"

        self._session.add(UserRole(user_id=user_id, role_id=role_id))
        try:
            self._session.flush()
        except IntegrityError:
            self._session.rollback()
            return "Role already assigned to user"

        self._logger.info("role_assigned_to_user", extra={"user_id": str(user_id), "role_id": str(role_id)})
        invalidate_after_commit(self._session, self._cache, str(user_id))
        return "Role assigned to user successfully"

    def remove_role_from_user(self, user_id: UUID, role_id: UUID) -> str:
        result = self._session.execute(
            delete(UserRole).where(UserRole.user_id == user_id, UserRole.role_id == role_id)
        )
        if result.rowcount:
            self._logger.info("role_removed_from_user", extra={"user_id": str(user_id), "role_id": str(role_id)})
            invalidate_after_commit(self._session, self._cache, str(user_id))
        return "Role removed from user successfully"

    def set_user_roles(self, user_id: UUID, role_ids: List[UUID]) -> SyncResult:
        self._require(User, user_id, RBACErrorCode.USER_NOT_FOUND)
        ensure_roles_exist(self._session, role_ids)

        result = sync_links(
            self._session,
            UserRole,
            owner_field="user_id",
            owner_id=user_id,
            target_field="role_id",
            target_ids=role_ids,
        )
        self._logger.info(
            "user_roles_synced",
            extra={"user_id": str(user_id), "added": result.added, "removed": result.removed, "kept": result.kept},
        )
        invalidate_after_commit(self._session, self._cache, str(user_id))
        return result

    def _require(self, model: type, entity_id: UUID, code: RBACErrorCode) -> None:
        if self._session.get(model, entity_id) is None:
            raise NotFoundError(code)
