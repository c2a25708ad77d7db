"""Idempotent bootstrap of permissions and roles from configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from rbac_core.core.config import RBACOptions, SeedPermission, SeedRole
from rbac_core.models.permission import Permission
from rbac_core.models.role import Role
from rbac_core.models.role_permission import RolePermission
from rbac_core.services.errors import BadRequestError
from rbac_core.services.validation import KeyValidationConfig, validate_key

SEED_ACTOR = "system"

logger = logging.getLogger("rbac_core.services.seed")


@dataclass
class SeedReport:
    permissions_created: List[str] = field(default_factory=list)
    roles_created: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    invalid: List[str] = field(default_factory=list)
    missing_permissions: List[str] = field(default_factory=list)


def seed_rbac_data(
    session: Session,
    options: RBACOptions,
    *,
    permissions: Sequence[SeedPermission] | None = None,
    roles: Sequence[SeedRole] | None = None,
) -> SeedReport:
    """Create configured permissions, then roles and their permission links.

    Entries whose key already exists are left untouched. Entries with an
    invalid key are logged and skipped. A role referencing an unknown
    permission key is still created, without that link. Any other failure
    propagates so the caller's transaction rolls back.
    """

    seed_permissions = options.seed_permissions if permissions is None else permissions
    seed_roles = options.seed_roles if roles is None else roles
    report = SeedReport()
    if not seed_permissions and not seed_roles:
        return report

    keys = KeyValidationConfig.from_options(options)

    for item in seed_permissions:
        try:
            key = validate_key("permission", item.key, keys)
        except BadRequestError as exc:
            logger.error(
                "rbac_seed_invalid_permission_key",
                extra={"key": item.key, "code": exc.code.value, "reason": exc.message},
            )
            report.invalid.append(item.key)
            continue

        if session.scalar(select(Permission.id).where(Permission.key == key)) is not None:
            report.skipped.append(key)
            continue

        session.add(
            Permission(
                name=item.name,
                key=key,
                description=item.description,
                is_active=item.is_active,
                created_by=SEED_ACTOR,
                updated_by=SEED_ACTOR,
            )
        )
        session.flush()
        report.permissions_created.append(key)
        logger.info("rbac_seed_permission_created", extra={"key": key})

    for item in seed_roles:
        try:
            key = validate_key("role", item.key, keys)
        except BadRequestError as exc:
            logger.error(
                "rbac_seed_invalid_role_key",
                extra={"key": item.key, "code": exc.code.value, "reason": exc.message},
            )
            report.invalid.append(item.key)
            continue

        if session.scalar(select(Role.id).where(Role.key == key)) is not None:
            report.skipped.append(key)
            continue

        role = Role(
            name=item.name,
            key=key,
            description=item.description,
            is_active=item.is_active,
            created_by=SEED_ACTOR,
            updated_by=SEED_ACTOR,
        )
        session.add(role)
        session.flush()
        report.roles_created.append(key)
        logger.info("rbac_seed_role_created", extra={"key": key})

        for permission_key in dict.fromkeys(item.permissions):
            permission_id = session.scalar(select(Permission.id).where(Permission.key == permission_key))
            if permission_id is None:
                logger.warning("Permission not found: %s (skipping association)", permission_key)
                report.missing_permissions.append(permission_key)
                continue
            session.add(RolePermission(role_id=role.id, permission_id=permission_id))
            logger.info(
                "rbac_seed_role_permission_linked",
                extra={"role_key": key, "permission_key": permission_key},
            )
        session.flush()

    logger.info(
        "rbac_seed_completed",
        extra={
            "permissions_created": len(report.permissions_created),
            "roles_created": len(report.roles_created),
            "skipped": len(report.skipped),
        },
    )
    return report
