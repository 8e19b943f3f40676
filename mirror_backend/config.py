"""
Configuration and settings for the asset mirror service.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")
    log_level: str = Field(default="INFO")

    # Database (Postgres expected, any SQLAlchemy URL works)
    database_url: Optional[str] = Field(default=None)

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, validation_alias="MIRROR_USE_IN_MEMORY_BACKENDS"
    )

    # Remote asset store
    remote_store: Literal["cloudinary", "s3"] = Field(default="cloudinary")
    remote_request_timeout: float = Field(default=30.0)

    cloudinary_cloud_name: Optional[str] = Field(default=None)
    cloudinary_api_key: Optional[str] = Field(default=None)
    cloudinary_api_secret: Optional[str] = Field(default=None)

    # S3-compatible storage (Tencent COS, AWS S3, MinIO)
    cos_endpoint: Optional[str] = Field(default=None)
    cos_region: Optional[str] = Field(default=None)
    cos_bucket: Optional[str] = Field(default=None)
    aws_access_key_id: Optional[str] = Field(default=None)
    aws_secret_access_key: Optional[str] = Field(default=None)
    s3_public_base_url: Optional[str] = Field(default=None)

    # Pagination walk bounds
    sync_page_size: int = Field(default=500, ge=1)
    sync_max_pages: int = Field(default=200, ge=1)
    sync_deadline_seconds: float = Field(default=120.0, gt=0)

    @property
    def cloudinary_configured(self) -> bool:
        return bool(
            self.cloudinary_cloud_name
            and self.cloudinary_api_key
            and self.cloudinary_api_secret
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
