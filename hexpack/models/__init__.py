"""
Data types from the perspective of the business logic.

Nothing specific to DynamoDB, Lambda or HTTP here. Wire names are camelCase
(aliases); Python code uses the snake_case attribute names.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _DomainModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    def to_wire(self) -> dict:
        """camelCase dict without unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


class AppUser(_DomainModel):
    """Authenticated caller, derived from verified claims."""

    id: str = ""
    name: str = ""


class PackageRequest(_DomainModel):
    """
    Request body as supplied by the caller.

    Every field is optional at parse time; required-field rules belong to
    the PackageService, not to parsing.
    """

    name: str = ""
    content_type: str | None = None
    file_name: str | None = None
    description: str | None = None


class Package(PackageRequest):
    """A PackageRequest merged with its owner and server-assigned metadata."""

    user_id: str
    user_name: str
    created_on: str = Field(description="ISO-8601 UTC creation timestamp")
    ttl: int = Field(description="Expiry, epoch seconds")


__all__ = ["AppUser", "Package", "PackageRequest"]
