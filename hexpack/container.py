"""
Process-wide wiring: settings -> repository -> service -> handler.

Plain constructor injection; each piece is built once per process on first
use and reused by later invocations (warm Lambda starts).
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from hexpack.auth.context import IdentityContext
from hexpack.config import get_settings
from hexpack.repositories.dynamodb import DynamoPackageRepository
from hexpack.repositories.port import PackageRepository
from hexpack.services.package_service import PackageService

if TYPE_CHECKING:
    from hexpack.handlers.package_lambda import PackageHandler

_identity_context: IdentityContext | None = None
_package_repository: PackageRepository | None = None
_package_service: PackageService | None = None
_package_handler: PackageHandler | None = None


def get_identity_context() -> IdentityContext:
    global _identity_context
    if _identity_context is None:
        settings = get_settings()
        _identity_context = IdentityContext(
            id_claims=settings.identity_id_claims,
            name_claim=settings.identity_name_claim,
        )
    return _identity_context


def get_package_repository() -> PackageRepository:
    """
    Raises:
        ConfigurationError: PACKAGE_TABLE_NAME is not set
    """
    global _package_repository
    if _package_repository is None:
        settings = get_settings()
        _package_repository = DynamoPackageRepository(
            settings.package_table_name,
            region_name=settings.aws_region,
            endpoint_url=settings.dynamodb_endpoint_url,
            conflict_check=settings.package_conflict_check,
        )
    return _package_repository


def get_package_service() -> PackageService:
    global _package_service
    if _package_service is None:
        settings = get_settings()
        _package_service = PackageService(
            get_package_repository(),
            retention=timedelta(seconds=settings.package_retention_seconds),
        )
    return _package_service


def get_package_handler() -> PackageHandler:
    from hexpack.handlers.package_lambda import PackageHandler

    global _package_handler
    if _package_handler is None:
        _package_handler = PackageHandler(get_package_service(), get_identity_context())
    return _package_handler


def override(
    *,
    identity: IdentityContext | None = None,
    repository: PackageRepository | None = None,
    service: PackageService | None = None,
) -> None:
    """Swap in collaborators (tests, local runs). Dependent pieces are rebuilt."""
    global _identity_context, _package_repository, _package_service, _package_handler
    if identity is not None:
        _identity_context = identity
    if repository is not None:
        _package_repository = repository
        _package_service = None
    if service is not None:
        _package_service = service
    _package_handler = None


def reset_container() -> None:
    global _identity_context, _package_repository, _package_service, _package_handler
    _identity_context = None
    _package_repository = None
    _package_service = None
    _package_handler = None
