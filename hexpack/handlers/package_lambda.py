"""
Entry from AWS Lambda (API Gateway proxy + Cognito authorizer).

Other entry points get their own module but reuse the same PackageService;
see `hexpack.api` for the HTTP one.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from hexpack.auth.context import IdentityContext, claims_from_event
from hexpack.container import get_identity_context, get_package_handler, get_package_service
from hexpack.handlers.lambda_utils import (
    HTTP_OK,
    api_response,
    bound_request_id,
    error_response,
    parse_request,
    wrap_api_handler,
)
from hexpack.kernel.errors import ConfigurationError
from hexpack.logging_config import configure_logging
from hexpack.models import AppUser, Package, PackageRequest
from hexpack.services.package_service import PackageService

configure_logging()

logger = structlog.get_logger()


class PackageHandler:
    """
    Deals with Lambda, API Gateway and authorizer interfacing, then calls
    the business logic for the actual request.

    Most of this is error handling; compare `create_package_handler_wrapped`
    below, which gets the same behavior from `wrap_api_handler`.
    """

    def __init__(self, package_service: PackageService, identity: IdentityContext):
        self.package_service = package_service
        self.identity = identity

    def __call__(self, event: Mapping[str, Any], context: Any = None) -> dict[str, Any]:
        with bound_request_id(context):
            try:
                self.identity.initialize(claims_from_event(event))
                request = parse_request(event, PackageRequest)
                result = self.package_service.create(request, self.identity.get_user())
                return api_response(HTTP_OK, result.to_json())
            except Exception as exc:
                return error_response(exc)
            finally:
                self.identity.destroy()


def create_package_handler(event: Mapping[str, Any], context: Any = None) -> dict[str, Any]:
    """AWS Lambda handler: explicit orchestration."""
    try:
        handler = get_package_handler()
    except ConfigurationError as exc:
        return error_response(exc)
    return handler(event, context)


@wrap_api_handler(PackageRequest, get_identity_context)
def create_package_handler_wrapped(request: PackageRequest, user: AppUser) -> Package:
    """AWS Lambda handler: same as above, boilerplate handled by the wrapper."""
    return get_package_service().create(request, user)
