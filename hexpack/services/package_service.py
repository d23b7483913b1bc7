"""
Package application logic.

Agnostic to how it is called and where data is stored: the caller's
identity arrives as an argument and persistence goes through the
PackageRepository port.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta

import structlog
from pydantic.alias_generators import to_camel

from hexpack.kernel.errors import UnauthorizedError, ValidationError
from hexpack.kernel.time import epoch_seconds, isoformat_z, utc_now
from hexpack.models import AppUser, Package, PackageRequest
from hexpack.repositories.port import PackageRepository

logger = structlog.get_logger()

DEFAULT_RETENTION = timedelta(seconds=60)

_REQUIRED_FIELDS = ("name", "content_type", "file_name")


def missing_required_fields(request: PackageRequest) -> list[str]:
    """Wire names of required fields that are absent or empty."""
    return [
        to_camel(attr)
        for attr in _REQUIRED_FIELDS
        if not getattr(request, attr)
    ]


class PackageService:
    """
    Creates packages for an authenticated user.

    Stateless: all per-request data is passed to `create`, so one instance
    is shared for the life of the process.
    """

    def __init__(
        self,
        package_repo: PackageRepository,
        *,
        retention: timedelta = DEFAULT_RETENTION,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.package_repo = package_repo
        self.retention = retention
        self.clock = clock

    def create(self, request: PackageRequest, user: AppUser) -> Package:
        """
        Validate the request, stamp ownership and expiry, and store it.

        Raises:
            ValidationError: A required field is missing or empty
            UnauthorizedError: The user has no identifier
            HexpackError: Whatever the repository raises, unchanged
        """
        missing = missing_required_fields(request)
        if missing:
            logger.info("Package request rejected", missing_fields=missing)
            raise ValidationError(meta={"missing_fields": missing})

        if not user.id:
            raise UnauthorizedError(message="User has no identifier")

        now = self.clock().replace(microsecond=0)
        package = Package(
            **request.model_dump(),
            user_id=user.id,
            user_name=user.name,
            created_on=isoformat_z(now),
            ttl=epoch_seconds(now + self.retention),
        )

        logger.info("Creating package", name=package.name, user_id=user.id, ttl=package.ttl)
        return self.package_repo.create(package)
