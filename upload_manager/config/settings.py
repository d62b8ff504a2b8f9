"""Application settings using Pydantic Settings."""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from ..utils.constants import (
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_MINIMUM_MULTIPART_UPLOAD_SIZE,
    DEFAULT_MULTIPART_UPLOAD_SIZE,
    DEFAULT_SIGNED_URL_CACHE_EXPIRE_TIME_SECONDS,
    DEFAULT_SIGNED_URL_EXPIRE_TIME_SECONDS,
    StorageClass,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="Upload Manager API", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")

    # Object store connection
    region: str = Field(default="us-east-1", alias="S3_REGION")
    access_key: str = Field(default="", alias="S3_ACCESS_KEY")
    secret_key: str = Field(default="", alias="S3_SECRET_KEY")
    endpoint: str = Field(default="https://s3.amazonaws.com", alias="S3_ENDPOINT")
    bucket: str = Field(default="uploads", alias="S3_BUCKET")

    # Uploads
    max_file_size: int = Field(
        default=DEFAULT_MAX_FILE_SIZE, gt=0, alias="S3_MAX_FILE_SIZE"
    )
    storage_class: StorageClass = Field(
        default=StorageClass.INTELLIGENT_TIERING, alias="S3_STORAGE_CLASS"
    )
    minimum_multipart_upload_size: int = Field(
        default=DEFAULT_MINIMUM_MULTIPART_UPLOAD_SIZE,
        gt=0,
        alias="S3_MINIMUM_MULTIPART_UPLOAD_SIZE",
    )
    default_multipart_upload_size: int = Field(
        default=DEFAULT_MULTIPART_UPLOAD_SIZE,
        gt=0,
        alias="S3_DEFAULT_MULTIPART_UPLOAD_SIZE",
    )

    # Signed URLs (both in seconds)
    signed_url_expire_time_seconds: int = Field(
        default=DEFAULT_SIGNED_URL_EXPIRE_TIME_SECONDS,
        gt=0,
        alias="S3_SIGNED_URL_EXPIRE_TIME_SECONDS",
    )
    signed_url_cache_expire_time_seconds: int = Field(
        default=DEFAULT_SIGNED_URL_CACHE_EXPIRE_TIME_SECONDS,
        gt=0,
        alias="S3_SIGNED_URL_CACHE_EXPIRE_TIME_SECONDS",
    )

    # Rate Limiting
    rate_limit_per_minute: int = Field(default=60, alias="RATE_LIMIT_PER_MINUTE")
    upload_rate_limit_per_minute: int = Field(default=20, gt=0, alias="UPLOAD_RATE_LIMIT_PER_MINUTE")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @model_validator(mode="after")
    def check_expiry_windows(self) -> "Settings":
        """A cached URL must never outlive the URL itself."""
        if self.signed_url_cache_expire_time_seconds >= self.signed_url_expire_time_seconds:
            raise ValueError(
                "S3_SIGNED_URL_CACHE_EXPIRE_TIME_SECONDS must be lower than "
                "S3_SIGNED_URL_EXPIRE_TIME_SECONDS"
            )
        if self.default_multipart_upload_size < self.minimum_multipart_upload_size:
            raise ValueError(
                "S3_DEFAULT_MULTIPART_UPLOAD_SIZE must not be lower than "
                "S3_MINIMUM_MULTIPART_UPLOAD_SIZE"
            )
        return self

    @property
    def signed_url_headroom_seconds(self) -> int:
        """Minimum remaining validity of a URL served from cache."""
        return self.signed_url_expire_time_seconds - self.signed_url_cache_expire_time_seconds


# Global settings instance
settings = Settings()
