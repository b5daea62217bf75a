"""Process settings loaded from environment variables"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings for external collaborators and runtime behaviour.

    Read from the environment or a `.env` file in the working directory:

    - CIVICTRACK_JWT_SECRET: secret used to verify bearer tokens issued by the auth provider
    - SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY: blob store credentials (uploads fail without them)
    - SUPABASE_BUCKET: storage bucket for issue media (default: issue-media)
    - GEOCODER_URL: Nominatim-compatible reverse geocoding endpoint
    - LOG_LEVEL, CIVICTRACK_ENV
    """

    jwt_secret: Optional[str] = Field(default=None, alias="CIVICTRACK_JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="CIVICTRACK_JWT_ALGORITHM")
    jwt_audience: Optional[str] = Field(default=None, alias="CIVICTRACK_JWT_AUDIENCE")

    supabase_url: Optional[str] = Field(default=None, alias="SUPABASE_URL")
    supabase_service_role_key: Optional[str] = Field(default=None, alias="SUPABASE_SERVICE_ROLE_KEY")
    supabase_bucket: str = Field(default="issue-media", alias="SUPABASE_BUCKET")
    upload_timeout_seconds: int = Field(default=30, alias="UPLOAD_TIMEOUT_SECONDS")
    upload_max_workers: int = Field(default=5, alias="UPLOAD_MAX_WORKERS")

    geocoder_url: str = Field(
        default="https://nominatim.openstreetmap.org/reverse",
        alias="GEOCODER_URL",
    )
    geocoder_timeout_seconds: int = Field(default=5, alias="GEOCODER_TIMEOUT_SECONDS")
    geocoder_user_agent: str = Field(default="civictrack/0.1", alias="GEOCODER_USER_AGENT")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    run_env: str = Field(default="production", alias="CIVICTRACK_ENV")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def blob_store_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_role_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()
