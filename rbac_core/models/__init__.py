"""SQLAlchemy ORM models for the RBAC service."""

from rbac_core.models.base import Base  # noqa: F401
from rbac_core.models.permission import Permission  # noqa: F401
from rbac_core.models.role import Role  # noqa: F401
from rbac_core.models.role_permission import RolePermission  # noqa: F401
from rbac_core.models.user import User, UserSession  # noqa: F401
from rbac_core.models.user_role import UserRole  # noqa: F401
