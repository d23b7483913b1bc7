"""
Test Configuration and Fixtures

Shared fixtures and fakes. Nothing here talks to AWS.
"""

import os

import pytest

# Set test environment variables before importing the package.
os.environ.setdefault("PACKAGE_TABLE_NAME", "packages-test")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from hexpack import container  # noqa: E402
from hexpack.auth.context import IdentityContext  # noqa: E402
from hexpack.config import get_settings  # noqa: E402
from hexpack.kernel.errors import StorageError  # noqa: E402
from hexpack.models import AppUser, Package, PackageRequest  # noqa: E402


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "api: HTTP adapter tests")


def pytest_collection_modifyitems(config, items):
    """Everything without an explicit tier is a unit test."""
    for item in items:
        if item.get_closest_marker("unit") is None:
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def _isolate_process_state():
    """Fresh settings, wiring and identity for every test."""
    get_settings.cache_clear()
    container.reset_container()
    IdentityContext().destroy()
    yield
    get_settings.cache_clear()
    container.reset_container()
    IdentityContext().destroy()


# =============================================================================
# DOMAIN FIXTURES
# =============================================================================


@pytest.fixture
def test_app_user() -> AppUser:
    return AppUser(id="utest", name="Unit Test")


@pytest.fixture
def test_claims() -> dict:
    return {"cognito:username": "utest", "name": "Unit Test"}


@pytest.fixture
def pkg_request() -> PackageRequest:
    return PackageRequest(name="Unit Test", content_type="text/plain", file_name="hello-world.txt")


@pytest.fixture
def pkg(pkg_request: PackageRequest, test_app_user: AppUser) -> Package:
    return Package(
        **pkg_request.model_dump(),
        user_id=test_app_user.id,
        user_name=test_app_user.name,
        created_on="2020-05-12T14:23:00Z",
        ttl=1589293440,
    )


@pytest.fixture
def make_event():
    """Factory for API Gateway proxy events with authorizer claims."""

    def _make(body, claims=None) -> dict:
        event: dict = {"body": body, "requestContext": {}}
        if claims is not None:
            event["requestContext"]["authorizer"] = {"claims": claims}
        return event

    return _make


# =============================================================================
# FAKES
# =============================================================================


class FakePackageRepository:
    """Records calls; returns or raises whatever the test sets up."""

    def __init__(self, *, error: Exception | None = None):
        self.error = error
        self.created: list[Package] = []

    def create(self, item: Package) -> Package:
        self.created.append(item)
        if self.error is not None:
            raise self.error
        return item


@pytest.fixture
def fake_repo() -> FakePackageRepository:
    return FakePackageRepository()


@pytest.fixture
def rejecting_repo() -> FakePackageRepository:
    return FakePackageRepository(error=StorageError(message="Reject"))
