from __future__ import annotations

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from hexpack.kernel.errors import ConfigurationError, ConflictError, StorageError
from hexpack.repositories.dynamodb import DynamoPackageRepository

pytestmark = [pytest.mark.unit]


class DummyTable:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[dict] = []

    def put_item(self, **kwargs):  # noqa: ANN003
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return {"ResponseMetadata": {"HTTPStatusCode": 200}}


class DummyDynamoDB:
    def __init__(self, table: DummyTable) -> None:
        self.table = table
        self.table_names: list[str] = []

    def Table(self, name: str) -> DummyTable:  # noqa: N802
        self.table_names.append(name)
        return self.table


def _client_error(code: str, message: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, "PutItem")


def test_requires_table_name():
    with pytest.raises(ConfigurationError) as exc_info:
        DynamoPackageRepository(None)
    assert "PACKAGE_TABLE_NAME" in str(exc_info.value)


def test_create_is_successful(pkg):
    table = DummyTable()
    dynamodb = DummyDynamoDB(table)
    repo = DynamoPackageRepository("TABLE_NAME", dynamodb=dynamodb)

    result = repo.create(pkg)

    assert result is pkg
    assert dynamodb.table_names == ["TABLE_NAME"]
    assert table.calls == [
        {
            "Item": {
                "name": "Unit Test",
                "contentType": "text/plain",
                "fileName": "hello-world.txt",
                "userId": "utest",
                "userName": "Unit Test",
                "createdOn": "2020-05-12T14:23:00Z",
                "ttl": 1589293440,
            }
        }
    ]


def test_create_overwrites_without_condition_by_default(pkg):
    table = DummyTable()
    repo = DynamoPackageRepository("TABLE_NAME", dynamodb=DummyDynamoDB(table))

    repo.create(pkg)
    repo.create(pkg)

    assert len(table.calls) == 2
    assert all("ConditionExpression" not in call for call in table.calls)


def test_create_wraps_client_error(pkg):
    table = DummyTable(error=_client_error("ProvisionedThroughputExceededException", "Reject"))
    repo = DynamoPackageRepository("TABLE_NAME", dynamodb=DummyDynamoDB(table))

    with pytest.raises(StorageError) as exc_info:
        repo.create(pkg)

    assert "Reject" in str(exc_info.value)
    assert exc_info.value.meta == {"backend_code": "ProvisionedThroughputExceededException"}


def test_create_wraps_connectivity_error(pkg):
    table = DummyTable(error=EndpointConnectionError(endpoint_url="http://localhost:8000"))
    repo = DynamoPackageRepository("TABLE_NAME", dynamodb=DummyDynamoDB(table))

    with pytest.raises(StorageError) as exc_info:
        repo.create(pkg)

    assert "http://localhost:8000" in str(exc_info.value)


def test_conflict_check_uses_conditional_put(pkg):
    table = DummyTable(error=_client_error("ConditionalCheckFailedException", "The conditional request failed"))
    repo = DynamoPackageRepository("TABLE_NAME", dynamodb=DummyDynamoDB(table), conflict_check=True)

    with pytest.raises(ConflictError) as exc_info:
        repo.create(pkg)

    assert exc_info.value.status_code == 409
    assert table.calls[0]["ConditionExpression"] == "attribute_not_exists(#name)"
    assert table.calls[0]["ExpressionAttributeNames"] == {"#name": "name"}


def test_resource_is_built_lazily(monkeypatch: pytest.MonkeyPatch, pkg):
    from hexpack.repositories import dynamodb as dynamodb_module

    calls: list[dict] = []
    table = DummyTable()

    def fake_resource(**kwargs):  # noqa: ANN003
        calls.append(kwargs)
        return DummyDynamoDB(table)

    monkeypatch.setattr(dynamodb_module, "build_dynamodb_resource", fake_resource)

    repo = DynamoPackageRepository("TABLE_NAME", region_name="eu-west-1", endpoint_url="http://localhost:8000")
    assert calls == []

    repo.create(pkg)
    repo.create(pkg)

    assert calls == [{"region_name": "eu-west-1", "endpoint_url": "http://localhost:8000"}]
    assert len(table.calls) == 2
