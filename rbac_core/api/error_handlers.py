"""Exception handlers for the FastAPI app."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from rbac_core.services.errors import ERROR_MESSAGES, RBACError, RBACErrorCode

logger = logging.getLogger("rbac_core.api.errors")


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RBACError)
    async def rbac_error_handler(request: Request, exc: RBACError) -> JSONResponse:  # noqa: WPS430
        return JSONResponse(
            status_code=exc.status_code,
            content={"code": exc.code.value, "detail": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: WPS430
        return JSONResponse(
            status_code=400,
            content={
                "code": RBACErrorCode.INVALID_REQUEST.value,
                "detail": ERROR_MESSAGES[RBACErrorCode.INVALID_REQUEST],
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:  # noqa: WPS430
        logger.error("storage_error", exc_info=exc, extra={"path": request.url.path})
        return JSONResponse(
            status_code=503,
            content={
                "code": RBACErrorCode.STORAGE_ERROR.value,
                "detail": ERROR_MESSAGES[RBACErrorCode.STORAGE_ERROR],
            },
        )
