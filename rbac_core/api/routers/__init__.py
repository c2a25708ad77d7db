"""Router registrations."""

from fastapi import APIRouter

from rbac_core.api.routers import assignments, health, permissions, queries, roles, users


def get_api_router() -> APIRouter:
    router = APIRouter()
    router.include_router(health.router, tags=["health"])
    router.include_router(permissions.router, prefix="/rbac", tags=["permissions"])
    router.include_router(roles.router, prefix="/rbac", tags=["roles"])
    router.include_router(assignments.router, prefix="/rbac", tags=["assignments"])
    router.include_router(users.router, prefix="/rbac", tags=["users"])
    router.include_router(queries.router, prefix="/rbac", tags=["authorization"])
    return router
