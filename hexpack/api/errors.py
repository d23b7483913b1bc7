from __future__ import annotations

import structlog
from fastapi import FastAPI
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from hexpack.kernel.errors import HexpackError, describe_error

logger = structlog.get_logger()


def register_exception_handlers(app: FastAPI) -> None:
    """Render errors the same way the Lambda handlers do (plain-text body)."""

    @app.exception_handler(HexpackError)
    async def _hexpack_error_handler(request: Request, exc: HexpackError) -> Response:
        if exc.is_client_error:
            logger.info("Request failed", code=exc.code, status_code=exc.status_code, error=exc.message)
            return PlainTextResponse(exc.message, status_code=exc.status_code)
        logger.error("Request failed", code=exc.code, error=exc.message)
        return PlainTextResponse(describe_error(exc), status_code=500)

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception) -> Response:
        logger.exception("Unhandled exception", error=str(exc))
        return PlainTextResponse(describe_error(exc), status_code=500)
