"""Application configuration using Pydantic settings."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal, Optional, get_args

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

RBACEndpoint = Literal[
    "listPermissions",
    "getPermission",
    "createPermission",
    "updatePermission",
    "deletePermission",
    "getPermissionsOptions",
    "getPermissionRoles",
    "listRoles",
    "getRole",
    "createRole",
    "updateRole",
    "deleteRole",
    "getRolesOptions",
    "getRolePermissions",
    "assignPermissionToRole",
    "removePermissionFromRole",
    "assignRoleToUser",
    "removeRoleFromUser",
    "getUserRoles",
    "getUserPermissions",
    "setUserRoles",
    "getUsersOptions",
    "checkPermission",
    "hasPermission",
]

RBAC_ENDPOINTS: tuple[str, ...] = get_args(RBACEndpoint)

DEFAULT_PERMISSION_KEY_PATTERN = r"^[a-z0-9_]+:[a-z0-9_]+$"
DEFAULT_ROLE_KEY_PATTERN = r"^[a-z0-9_]+$"


class SeedPermission(BaseModel):
    """Permission created at startup when no permission with the same key exists."""

    key: str
    name: str
    description: Optional[str] = None
    is_active: bool = True


class SeedRole(BaseModel):
    """Role created at startup, linked to permissions by key."""

    key: str
    name: str
    description: Optional[str] = None
    is_active: bool = True
    permissions: List[str] = Field(default_factory=list)


class RBACOptions(BaseModel):
    """Per-deployment RBAC behaviour handed to every service."""

    min_permission_key_length: int = Field(default=3, ge=1)
    max_permission_key_length: int = Field(default=50, ge=1)
    permission_key_pattern: str = DEFAULT_PERMISSION_KEY_PATTERN
    permission_key_error_message: Optional[str] = None

    min_role_key_length: int = Field(default=3, ge=1)
    max_role_key_length: int = Field(default=50, ge=1)
    role_key_pattern: str = DEFAULT_ROLE_KEY_PATTERN
    role_key_error_message: Optional[str] = None

    # Applies to both key patterns.
    case_insensitive_keys: bool = True

    default_limit: int = Field(default=10, ge=1)
    max_limit: int = Field(default=100, ge=1)
    default_offset: int = Field(default=0, ge=0)

    seed_permissions: List[SeedPermission] = Field(default_factory=list)
    seed_roles: List[SeedRole] = Field(default_factory=list)

    disabled_endpoints: List[RBACEndpoint] = Field(default_factory=list)
    admin_role: str = Field(default="admin", min_length=1)
    delete_behavior: Literal["restrict", "cascade"] = "restrict"

    @field_validator("disabled_endpoints", mode="before")
    @classmethod
    def parse_disabled_endpoints(cls, value: str | List[str] | None) -> List[str]:
        if value is None or value == "":
            return []
        if isinstance(value, str):
            return [name.strip() for name in value.split(",") if name.strip()]
        return value

    def is_endpoint_disabled(self, name: str) -> bool:
        return name in self.disabled_endpoints


class AppSettings(BaseSettings):
    """Service configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RBAC_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    environment: Literal["local", "test", "staging", "production"] = Field(default="local")
    service_name: str = Field(default="rbac-core")
    database_url: str = Field(default="sqlite:///./data/rbac.db")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    sql_echo: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=True)
    redis_url: str | None = Field(default=None)
    redis_token: str | None = Field(default=None)
    redis_cache_prefix: str = Field(default="rbac")
    redis_cache_ttl: int = Field(default=300)
    options: RBACOptions = Field(default_factory=RBACOptions)

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("redis_url", "redis_token", mode="before")
    @classmethod
    def empty_string_to_none(cls, value: str | None) -> str | None:
        if value == "":
            return None
        return value

    @field_validator("redis_cache_ttl", mode="before")
    @classmethod
    def ensure_int_ttl(cls, value: int | str | None) -> int | str | None:
        if value in (None, ""):
            return 300
        return value


@lru_cache
def get_settings() -> AppSettings:
    """Return cached application settings instance."""

    return AppSettings()
