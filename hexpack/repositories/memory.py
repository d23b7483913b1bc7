"""In-process PackageRepository for local runs and tests."""

from __future__ import annotations

from hexpack.kernel.errors import ConflictError
from hexpack.models import Package


class InMemoryPackageRepository:
    def __init__(self, *, conflict_check: bool = False):
        self.conflict_check = conflict_check
        self.items: dict[str, Package] = {}

    def create(self, item: Package) -> Package:
        if self.conflict_check and item.name in self.items:
            raise ConflictError(meta={"name": item.name})
        self.items[item.name] = item
        return item

    def get(self, name: str) -> Package | None:
        return self.items.get(name)
