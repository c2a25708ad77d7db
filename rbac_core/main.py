"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from rbac_core.api.error_handlers import register_exception_handlers
from rbac_core.api.routers import get_api_router
from rbac_core.core.config import AppSettings, get_settings
from rbac_core.core.database import session_scope
from rbac_core.core.logging import configure_logging
from rbac_core.services.cache import build_permission_cache
from rbac_core.services.seed import seed_rbac_data


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: D401
    """Application lifespan context for startup/shutdown hooks."""

    with session_scope() as session:
        seed_rbac_data(session, app.state.rbac_options)

    yield

    close = getattr(app.state.permission_cache, "close", None)
    if close is not None:
        close()


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Application factory."""

    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="RBAC Core",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.rbac_options = settings.options
    app.state.permission_cache = build_permission_cache(settings)

    register_exception_handlers(app)
    app.include_router(get_api_router())
    return app


app = create_app()
