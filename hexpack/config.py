"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage (DynamoDB)
    package_table_name: str | None = Field(default=None)
    aws_region: str | None = Field(default=None)
    dynamodb_endpoint_url: str | None = Field(default=None)

    # Packages
    package_retention_seconds: int = Field(default=60, ge=0)
    package_conflict_check: bool = Field(default=False)

    # Identity claims (as filled in by the upstream authorizer)
    identity_id_claims: list[str] = Field(default=["cognito:username", "sub"])
    identity_name_claim: str = Field(default="name")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_format: Literal["json", "text"] = Field(default="json")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
