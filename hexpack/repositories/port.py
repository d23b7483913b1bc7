"""Storage port for packages.

The service depends on this protocol only; adapters live beside it.
"""

from __future__ import annotations

from typing import Protocol

from hexpack.models import Package


class PackageRepository(Protocol):
    """Persists packages keyed by `name`."""

    def create(self, item: Package) -> Package:
        ...
