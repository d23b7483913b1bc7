"""
Helpers for AWS Lambda handlers behind API Gateway (proxy integration).

`wrap_api_handler` removes the boilerplate: body parsing, identity scope,
JSON success response and error-to-status mapping.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from functools import wraps
from typing import Any, TypeVar

import pydantic
import structlog

from hexpack.auth.context import IdentityContext, claims_from_event
from hexpack.kernel.errors import HexpackError, ValidationError, describe_error
from hexpack.models import AppUser

logger = structlog.get_logger()

HTTP_OK = 200
HTTP_INTERNAL_ERROR = 500

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


def api_response(status_code: int, body: str) -> dict[str, Any]:
    return {"statusCode": status_code, "body": body}


def error_response(exc: BaseException) -> dict[str, Any]:
    """
    Map an exception to an API Gateway response.

    Client errors keep their status and message; everything else is a 500
    with the error's textual description.
    """
    if isinstance(exc, HexpackError) and exc.is_client_error:
        logger.info("Request failed", code=exc.code, status_code=exc.status_code, error=exc.message)
        return api_response(exc.status_code, exc.message)

    if isinstance(exc, HexpackError):
        logger.error("Request failed", code=exc.code, error=exc.message)
    else:
        logger.exception("Unhandled exception", error=str(exc))
    return api_response(HTTP_INTERNAL_ERROR, describe_error(exc))


def parse_body(event: Mapping[str, Any] | None) -> dict[str, Any]:
    """JSON object from the event body; absent or malformed bodies become {}."""
    if not isinstance(event, Mapping):
        return {}
    body = event.get("body")
    if isinstance(body, Mapping):
        return dict(body)
    if not body:
        return {}
    try:
        parsed = json.loads(body)
    except (TypeError, ValueError):
        logger.debug("Ignoring malformed request body")
        return {}
    return parsed if isinstance(parsed, dict) else {}


def parse_request(event: Mapping[str, Any] | None, model: type[ModelT]) -> ModelT:
    """
    Parse the event body into `model`.

    Raises:
        ValidationError: A field has the wrong type
    """
    try:
        return model.model_validate(parse_body(event))
    except pydantic.ValidationError as exc:
        raise ValidationError(
            meta={"fields": [".".join(str(p) for p in err["loc"]) for err in exc.errors()]},
        ) from exc


def _request_id(context: Any) -> str | None:
    return getattr(context, "aws_request_id", None)


@contextmanager
def bound_request_id(context: Any) -> Iterator[None]:
    """Bind the Lambda request id to the structlog context for one invocation."""
    request_id = _request_id(context)
    if request_id:
        structlog.contextvars.bind_contextvars(request_id=request_id)
    try:
        yield
    finally:
        if request_id:
            structlog.contextvars.unbind_contextvars("request_id")


def wrap_api_handler(
    request_model: type[ModelT],
    identity: IdentityContext | Callable[[], IdentityContext],
) -> Callable[[Callable[[ModelT, AppUser], pydantic.BaseModel]], Callable[..., dict[str, Any]]]:
    """
    Decorate `fn(request, user) -> model` into a Lambda handler.

    `identity` may be a factory so the context is resolved on first call.

    Usage:
        @wrap_api_handler(PackageRequest, get_identity_context)
        def handler(request: PackageRequest, user: AppUser) -> Package:
            return get_package_service().create(request, user)
    """

    def _identity() -> IdentityContext:
        return identity if isinstance(identity, IdentityContext) else identity()

    def decorator(fn: Callable[[ModelT, AppUser], pydantic.BaseModel]) -> Callable[..., dict[str, Any]]:
        @wraps(fn)
        def handler(event: Mapping[str, Any], context: Any = None) -> dict[str, Any]:
            with bound_request_id(context):
                try:
                    ctx = _identity()
                    with ctx.scope(claims_from_event(event)):
                        request = parse_request(event, request_model)
                        result = fn(request, ctx.get_user())
                except Exception as exc:
                    return error_response(exc)
                return api_response(HTTP_OK, result.model_dump_json(by_alias=True, exclude_none=True))

        return handler

    return decorator
