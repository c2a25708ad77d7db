"""Key format and length validation for permission and role identifiers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Literal, Optional, Pattern

from rbac_core.core.config import RBACOptions
from rbac_core.services.errors import BadRequestError, RBACErrorCode

KeyKind = Literal["permission", "role"]

_DEFAULT_FORMAT_MESSAGES = {
    "permission": 'Permission key must follow the format "feature:action" (e.g., "user:read", "post:write").',
    "role": 'Role key must contain only letters, numbers, or underscores (e.g., "admin", "editor").',
}


@dataclass(frozen=True)
class KeyValidationOptions:
    min_length: int
    max_length: int
    pattern: Pattern[str]
    error_message: Optional[str] = None


@dataclass(frozen=True)
class KeyValidationConfig:
    permission: KeyValidationOptions
    role: KeyValidationOptions

    @classmethod
    def from_options(cls, options: RBACOptions) -> "KeyValidationConfig":
        flags = re.IGNORECASE if options.case_insensitive_keys else 0
        return cls(
            permission=KeyValidationOptions(
                min_length=options.min_permission_key_length,
                max_length=options.max_permission_key_length,
                pattern=re.compile(options.permission_key_pattern, flags),
                error_message=options.permission_key_error_message,
            ),
            role=KeyValidationOptions(
                min_length=options.min_role_key_length,
                max_length=options.max_role_key_length,
                pattern=re.compile(options.role_key_pattern, flags),
                error_message=options.role_key_error_message,
            ),
        )

    def for_kind(self, kind: KeyKind) -> KeyValidationOptions:
        return self.permission if kind == "permission" else self.role


def validate_key(kind: KeyKind, key: Any, config: KeyValidationConfig) -> str:
    """Validate ``key`` against the rules for ``kind`` and return it trimmed.

    Checks run in order: non-empty string, minimum length, maximum length,
    pattern. The first failure raises :class:`BadRequestError` whose code
    names the failed check (``INVALID_<KIND>_KEY``, ``..._LENGTH`` or
    ``..._FORMAT``). A configured error message only replaces the format
    message.
    """

    rules = config.for_kind(kind)
    label = kind.capitalize()
    prefix = f"INVALID_{kind.upper()}_KEY"

    if not isinstance(key, str):
        raise BadRequestError(RBACErrorCode(prefix), f"{label} key must be a string")

    trimmed = key.strip()
    if not trimmed:
        raise BadRequestError(RBACErrorCode(prefix), f"{label} key cannot be empty")

    if len(trimmed) < rules.min_length:
        raise BadRequestError(
            RBACErrorCode(f"{prefix}_LENGTH"),
            f"{label} key must be at least {rules.min_length} characters long",
        )

    if len(trimmed) > rules.max_length:
        raise BadRequestError(
            RBACErrorCode(f"{prefix}_LENGTH"),
            f"{label} key must not exceed {rules.max_length} characters",
        )

    if not rules.pattern.search(trimmed):
        raise BadRequestError(
            RBACErrorCode(f"{prefix}_FORMAT"),
            rules.error_message or _DEFAULT_FORMAT_MESSAGES[kind],
        )

    return trimmed
