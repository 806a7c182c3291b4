"""Application configuration using Pydantic Settings."""

from enum import Enum
from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageProvider(str, Enum):
    GCS = "gcs"
    S3 = "s3"


class Settings(BaseSettings):
    """RentDesk settings, read from the process environment or backend/.env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "RentDesk"
    debug: bool = False
    api_v1_prefix: str = "/v1"
    log_level: str = "INFO"
    # Comma separated
    allowed_origins: str = "http://localhost:3000"

    database_url: str

    firebase_project_id: str
    google_application_credentials: Optional[str] = None

    storage_provider: StorageProvider = StorageProvider.GCS
    gcs_bucket_name: Optional[str] = None
    gcs_project_id: Optional[str] = None
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: str = "us-east-1"
    s3_bucket_name: Optional[str] = None

    # Signed uploads (renter lease copies, message attachments)
    presign_ttl_seconds: int = 300
    max_upload_size_mb: int = 25

    # Renter workflow
    invitation_ttl_days: int = 14
    notification_window_days: int = 30
    default_lease_term_days: int = 365

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("invitation_ttl_days", "notification_window_days", "default_lease_term_days")
    @classmethod
    def positive_days(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("day counts must be positive")
        return v

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def bucket_name(self) -> str:
        """Bucket for the configured provider; raises when it is unset."""
        names = {
            StorageProvider.GCS: ("GCS_BUCKET_NAME", self.gcs_bucket_name),
            StorageProvider.S3: ("S3_BUCKET_NAME", self.s3_bucket_name),
        }
        env_name, value = names[self.storage_provider]
        if not value:
            raise ValueError(f"{env_name} required when STORAGE_PROVIDER={self.storage_provider.value}")
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
