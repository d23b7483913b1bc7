"""
The unlayered version of "create package".

HTTP parsing, claim extraction, validation, DynamoDB details and error
mapping all live in one function. It works, but none of it can be tested or
reused without the rest. Kept for comparison with `hexpack.handlers`.
"""

from __future__ import annotations

import json
import os
import time
from datetime import datetime, timezone
from typing import Any

_dynamodb = None


def _get_dynamodb():
    global _dynamodb
    if _dynamodb is None:
        import boto3

        _dynamodb = boto3.resource("dynamodb")
    return _dynamodb


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """AWS Lambda function entry point."""
    try:
        request = json.loads(event.get("body") or "{}")
    except ValueError:
        request = {}
    if not isinstance(request, dict):
        request = {}
    claims = ((event.get("requestContext") or {}).get("authorizer") or {}).get("claims") or {}

    if not all(request.get(key) for key in ("name", "description", "contentType", "fileName")):
        return {"statusCode": 400, "body": "Request validation error"}

    # DynamoDB details right in the handler
    table_name = os.environ.get("TABLE_NAME")
    epoch_time = int(time.time())
    entry = {
        **request,
        "userId": claims.get("cognito:username") or "",
        "userName": claims.get("name") or "",
        "createdOn": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "ttl": epoch_time + 60,
    }

    try:
        _add_package(table_name, entry)
        return {"statusCode": 200, "body": json.dumps(entry)}
    except Exception as exc:
        message = str(exc)
        if message == "Name already exists":
            return {"statusCode": 401, "body": message}
        return {"statusCode": 500, "body": message}


def _add_package(table_name: str | None, entry: dict[str, Any]) -> dict[str, Any]:
    # Returns the raw DynamoDB response to the caller
    if not table_name:
        raise RuntimeError("tableName is not defined")
    return _get_dynamodb().Table(table_name).put_item(Item=entry)
