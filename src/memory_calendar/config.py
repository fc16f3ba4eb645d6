"""Application configuration."""

import os

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

INDEX_FILENAME = "date-media-index.json"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    auth_secret: str | None = None
    viewer_password: str = ""
    admin_pin: str = ""
    aws_region: str = "us-west-1"
    aws_access_key_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "aws_access_key_id_dynamo", "aws_access_key_id"
        ),
    )
    aws_secret_access_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "aws_secret_access_key_dynamo", "aws_secret_access_key"
        ),
    )
    s3_bucket_name: str = ""
    s3_processed_prefix: str = "processed/"
    s3_source_prefix: str = ""
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    memories_table: str = "valentine_memories"
    capture_date_cache_ttl_seconds: int = 24 * 60 * 60
    date_media_live_fallback: bool = False
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
        populate_by_name=True,
    )


def index_key(processed_prefix: str) -> str:
    """Return the index object key for a processed prefix."""
    return f"{processed_prefix.rstrip('/')}/{INDEX_FILENAME}"
