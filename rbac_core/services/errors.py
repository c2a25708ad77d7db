"""RBAC error taxonomy shared by services and the HTTP layer."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional


class RBACErrorCode(str, Enum):
    PERMISSION_NOT_FOUND = "PERMISSION_NOT_FOUND"
    PERMISSION_ALREADY_EXISTS = "PERMISSION_ALREADY_EXISTS"
    ROLE_NOT_FOUND = "ROLE_NOT_FOUND"
    ROLE_ALREADY_EXISTS = "ROLE_ALREADY_EXISTS"
    INVALID_PERMISSION = "INVALID_PERMISSION"
    INVALID_ROLE = "INVALID_ROLE"
    CANNOT_DELETE_ASSIGNED_PERMISSION = "CANNOT_DELETE_ASSIGNED_PERMISSION"
    CANNOT_DELETE_ASSIGNED_ROLE = "CANNOT_DELETE_ASSIGNED_ROLE"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    INVALID_PERMISSION_KEY = "INVALID_PERMISSION_KEY"
    INVALID_PERMISSION_KEY_LENGTH = "INVALID_PERMISSION_KEY_LENGTH"
    INVALID_PERMISSION_KEY_FORMAT = "INVALID_PERMISSION_KEY_FORMAT"
    INVALID_ROLE_KEY = "INVALID_ROLE_KEY"
    INVALID_ROLE_KEY_LENGTH = "INVALID_ROLE_KEY_LENGTH"
    INVALID_ROLE_KEY_FORMAT = "INVALID_ROLE_KEY_FORMAT"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    INVALID_SORT_FIELD = "INVALID_SORT_FIELD"
    INVALID_REQUEST = "INVALID_REQUEST"
    STORAGE_ERROR = "STORAGE_ERROR"


ERROR_MESSAGES: Dict[RBACErrorCode, str] = {
    RBACErrorCode.PERMISSION_NOT_FOUND: "Permission not found.",
    RBACErrorCode.PERMISSION_ALREADY_EXISTS: "Permission with this key already exists.",
    RBACErrorCode.ROLE_NOT_FOUND: "Role not found.",
    RBACErrorCode.ROLE_ALREADY_EXISTS: "Role with this key already exists.",
    RBACErrorCode.INVALID_PERMISSION: "Invalid permission.",
    RBACErrorCode.INVALID_ROLE: "Invalid role.",
    RBACErrorCode.CANNOT_DELETE_ASSIGNED_PERMISSION: "Cannot delete permission that is assigned to roles.",
    RBACErrorCode.CANNOT_DELETE_ASSIGNED_ROLE: "Cannot delete role that is assigned to users.",
    RBACErrorCode.PERMISSION_DENIED: "You don't have permission to perform this action.",
    RBACErrorCode.INVALID_PERMISSION_KEY: "Permission key must be a non-empty string.",
    RBACErrorCode.INVALID_ROLE_KEY: "Role key must be a non-empty string.",
    RBACErrorCode.USER_NOT_FOUND: "User not found.",
    RBACErrorCode.UNAUTHORIZED: "Authentication required.",
    RBACErrorCode.FORBIDDEN: "Administrator role required.",
    RBACErrorCode.NOT_FOUND: "Not found.",
    RBACErrorCode.INVALID_SORT_FIELD: "Unsupported sort field.",
    RBACErrorCode.INVALID_REQUEST: "Invalid request.",
    RBACErrorCode.STORAGE_ERROR: "The data store could not complete the request.",
}


class RBACError(Exception):
    """Base class for RBAC errors; carries an HTTP status and a stable code."""

    status_code = 400
    default_code = RBACErrorCode.INVALID_REQUEST

    def __init__(self, code: Optional[RBACErrorCode] = None, message: Optional[str] = None) -> None:
        self.code = code or self.default_code
        self.message = message or ERROR_MESSAGES.get(self.code, self.code.value)
        super().__init__(self.message)


class BadRequestError(RBACError):
    """Raised for validation failures and duplicate keys."""


class UnauthorizedError(RBACError):
    """Raised when the request carries no valid session."""

    status_code = 401
    default_code = RBACErrorCode.UNAUTHORIZED


class ForbiddenError(RBACError):
    """Raised when the session user lacks the administrator role."""

    status_code = 403
    default_code = RBACErrorCode.FORBIDDEN


class NotFoundError(RBACError):
    """Raised for missing entities and disabled endpoints."""

    status_code = 404
    default_code = RBACErrorCode.NOT_FOUND


class StorageError(RBACError):
    """Raised when the database fails underneath an operation."""

    status_code = 503
    default_code = RBACErrorCode.STORAGE_ERROR
