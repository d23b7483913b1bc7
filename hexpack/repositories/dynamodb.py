"""
DynamoDB storage of packages.

No business logic here, only the external service. The table handle is
injected so tests (or a wrapper that enhances the default behavior) can
replace it.
"""

from __future__ import annotations

from typing import Any

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from hexpack.kernel.errors import ConfigurationError, ConflictError, StorageError
from hexpack.models import Package

logger = structlog.get_logger()

_CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


def build_dynamodb_resource(*, region_name: str | None = None, endpoint_url: str | None = None):
    import boto3

    return boto3.resource(
        "dynamodb",
        region_name=region_name or None,
        endpoint_url=endpoint_url or None,
    )


class DynamoPackageRepository:
    """PackageRepository backed by a DynamoDB table keyed by `name`."""

    def __init__(
        self,
        table_name: str | None,
        *,
        dynamodb: Any = None,
        region_name: str | None = None,
        endpoint_url: str | None = None,
        conflict_check: bool = False,
    ):
        if not table_name:
            raise ConfigurationError(message="PACKAGE_TABLE_NAME is not defined")
        self.table_name = table_name
        self.conflict_check = conflict_check
        self._dynamodb = dynamodb
        self._region_name = region_name
        self._endpoint_url = endpoint_url
        self._table = None

    @property
    def table(self):
        # Construction must not touch AWS; the resource is built on first put.
        if self._table is None:
            if self._dynamodb is None:
                self._dynamodb = build_dynamodb_resource(
                    region_name=self._region_name,
                    endpoint_url=self._endpoint_url,
                )
            self._table = self._dynamodb.Table(self.table_name)
        return self._table

    def create(self, item: Package) -> Package:
        params: dict[str, Any] = {"Item": item.to_wire()}
        if self.conflict_check:
            params["ConditionExpression"] = "attribute_not_exists(#name)"
            params["ExpressionAttributeNames"] = {"#name": "name"}

        try:
            self.table.put_item(**params)
        except ClientError as exc:
            error_code = exc.response.get("Error", {}).get("Code")
            if error_code == _CONDITIONAL_CHECK_FAILED:
                raise ConflictError(meta={"name": item.name}) from exc
            logger.warning(
                "DynamoDB put_item failed",
                table=self.table_name,
                error_code=error_code,
                error=str(exc),
            )
            raise StorageError(message=str(exc), meta={"backend_code": error_code}) from exc
        except BotoCoreError as exc:
            logger.warning("DynamoDB unreachable", table=self.table_name, error=str(exc))
            raise StorageError(message=str(exc)) from exc

        logger.debug("Package stored", table=self.table_name, name=item.name)
        return item
