"""
HTTP entry point (FastAPI) over the same PackageService as the Lambda handler.

Runs behind a gateway that has already authenticated the caller and forwards
the verified identity as `X-Auth-User-Id` / `X-Auth-User-Name`.
"""

from __future__ import annotations

import secrets
from collections.abc import Callable

import anyio
import structlog
from fastapi import APIRouter, Depends, FastAPI, Header, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from hexpack.api.errors import register_exception_handlers
from hexpack.auth.context import IdentityContext
from hexpack.config import get_settings
from hexpack.container import get_identity_context, get_package_service
from hexpack.handlers.lambda_utils import parse_request
from hexpack.logging_config import configure_logging
from hexpack.models import PackageRequest
from hexpack.services.package_service import PackageService

logger = structlog.get_logger()

USER_ID_HEADER = "X-Auth-User-Id"
USER_NAME_HEADER = "X-Auth-User-Name"

router = APIRouter()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Add a request ID to every request and bind it for logging."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or secrets.token_hex(8)
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
        response.headers["X-Request-ID"] = request_id
        return response


def trusted_claims(
    user_id: str | None = Header(default=None, alias=USER_ID_HEADER),
    user_name: str | None = Header(default=None, alias=USER_NAME_HEADER),
) -> dict[str, str] | None:
    """Claims forwarded by the gateway, keyed the way the authorizer keys them."""
    if not user_id and not user_name:
        return None
    settings = get_settings()
    return {
        settings.identity_id_claims[0]: user_id or "",
        settings.identity_name_claim: user_name or "",
    }


async def _read_request(request: Request) -> PackageRequest:
    return parse_request({"body": await request.body()}, PackageRequest)


@router.post("/packages")
async def create_package(
    request: Request,
    claims: dict[str, str] | None = Depends(trusted_claims),
    package_service: PackageService = Depends(get_package_service),
    identity: IdentityContext = Depends(get_identity_context),
) -> Response:
    with identity.scope(claims):
        package_request = await _read_request(request)
        user = identity.get_user()
        # boto3 is blocking; the user travels as an argument into the worker thread.
        package = await anyio.to_thread.run_sync(package_service.create, package_request, user)
    return Response(content=package.to_json(), media_type="application/json")


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="hexpack", version="0.1.0")
    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)
    app.include_router(router)
    return app
