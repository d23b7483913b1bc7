from hexpack.repositories.dynamodb import DynamoPackageRepository
from hexpack.repositories.memory import InMemoryPackageRepository
from hexpack.repositories.port import PackageRepository

__all__ = [
    "DynamoPackageRepository",
    "InMemoryPackageRepository",
    "PackageRepository",
]
