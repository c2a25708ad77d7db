"""Business logic service layer."""

from rbac_core.services.assignments import AssignmentService  # noqa: F401
from rbac_core.services.authorization import AuthorizationService  # noqa: F401
from rbac_core.services.permissions import PermissionService  # noqa: F401
from rbac_core.services.roles import RoleService  # noqa: F401
from rbac_core.services.seed import seed_rbac_data  # noqa: F401
