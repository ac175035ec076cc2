# src/ebooks_api/config/settings.py
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from typing_extensions import Self
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MAX_FILE_SIZE = 104857600  # 100 MiB
DEFAULT_SIGNED_URL_EXPIRES_IN = 3600  # 1 hour


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from ebooks_api.config.settings import get_settings
        settings = get_settings()
        bucket_name = settings.s3_bucket_name
    """

    # Application Settings
    app_name: str = Field(
        default="ebooks-api",
        description="Application name"
    )

    # AWS Core Settings
    aws_region: str = Field(
        default="us-east-1",
        alias="AWS_DEFAULT_REGION"
    )

    aws_access_key_id: Optional[str] = Field(
        default=None,
        alias="AWS_ACCESS_KEY_ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default=None,
        alias="AWS_SECRET_ACCESS_KEY"
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        alias="AWS_ENDPOINT_URL",
        description="Custom S3 endpoint, e.g. a local moto server or MinIO"
    )

    # S3 Configuration
    s3_bucket_name: str = Field(
        default="ebooks",
        description="S3 bucket holding uploaded e-books"
    )

    create_bucket_on_startup: bool = Field(
        default=False,
        description="Create the S3 bucket when the app starts if it is missing"
    )

    # Upload / view policy
    max_file_size: int = Field(
        default=DEFAULT_MAX_FILE_SIZE,
        gt=0,
        description="Largest accepted e-book in bytes"
    )

    upload_url_expires_in: int = Field(
        default=DEFAULT_SIGNED_URL_EXPIRES_IN,
        gt=0,
        description="Validity of signed upload URLs in seconds"
    )

    view_url_expires_in: int = Field(
        default=DEFAULT_SIGNED_URL_EXPIRES_IN,
        gt=0,
        description="Validity of signed view URLs in seconds"
    )

    # Database Configuration
    database_path: str = Field(
        default="ebooks.db",
        description="SQLite file holding e-book metadata and view logs"
    )

    # Authentication
    auth_mode: str = Field(
        default="header",
        description="Identity source: header (X-User-Id) or jwt (Bearer token)"
    )

    jwt_secret: Optional[str] = Field(
        default=None,
        description="Shared secret used to verify Bearer tokens in jwt mode"
    )

    jwt_algorithm: str = Field(
        default="HS256",
        description="Signing algorithm of Bearer tokens"
    )

    jwt_audience: Optional[str] = Field(
        default=None,
        description="Expected aud claim of Bearer tokens, e.g. authenticated"
    )

    # HTTP
    cors_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed to call the API from a browser"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("auth_mode")
    @classmethod
    def validate_auth_mode(cls, v: str) -> str:
        """Validate auth mode is one of the allowed values."""
        v = v.lower()
        valid_modes = ["header", "jwt"]
        if v not in valid_modes:
            raise ValueError(f"Invalid auth_mode: {v}. Must be one of {valid_modes}")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def check_jwt_secret_is_set_in_jwt_mode(self) -> Self:
        if self.auth_mode == "jwt" and not self.jwt_secret:
            raise ValueError("jwt_secret is required when auth_mode is jwt")
        return self

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
