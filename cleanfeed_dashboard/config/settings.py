"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables (and an optional .env
file for local development). Settings are read once at startup and
injected into the components that need them; nothing below the API
layer reads the environment directly.

Required values default to empty strings rather than failing inside
Pydantic so that validate_required_fields() can report every missing
variable at once.
"""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..infrastructure.storage.client import StorageConfig


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Variable names match the deployment's docker-compose file
    (DASH_USER, SPACES_BUCKET, ...).
    """

    # Operator credentials
    dash_user: str = Field(
        default="",
        description="Operator username for HTTP Basic auth"
    )
    dash_pass: str = Field(
        default="",
        description="Operator password for HTTP Basic auth"
    )

    # Spaces / S3 storage
    spaces_access_key: str = Field(default="", description="Spaces access key")
    spaces_secret_key: str = Field(default="", description="Spaces secret key")
    spaces_region: str = Field(default="", description="Spaces region, e.g. nyc3")
    spaces_bucket: str = Field(default="", description="Bucket holding the recordings")
    spaces_endpoint: str = Field(
        default="",
        description="Spaces endpoint URL, e.g. https://nyc3.digitaloceanspaces.com"
    )
    spaces_mock_mode: bool = Field(
        default=False,
        description="Use in-memory mock instead of real Spaces. Enables local dev without a bucket."
    )

    # Server
    dash_host: str = Field(default="0.0.0.0", description="Interface to listen on")
    dash_port: int = Field(
        default=3000,
        validation_alias=AliasChoices("DASH_PORT", "PORT"),
        description="Listening port. DASH_PORT wins over PORT."
    )

    # Dashboard behavior
    forward_env_path: str = Field(
        default="config/forward.env",
        description="File the forwarding process reads RTMP_URL/STREAM_KEY from"
    )
    catalog_prefix: str = Field(
        default="cleanfeed/",
        description="Only objects under this prefix are listed"
    )
    catalog_max_items: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Objects requested per listing. S3 caps a page at 1000."
    )
    presign_expiry_seconds: int = Field(
        default=3600,
        ge=1,
        description="Lifetime of generated download links"
    )
    catalog_list_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Listing slower than this renders an empty list"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def validate_required_fields(self) -> list[str]:
        """
        Return the env var names of every missing required value.

        Storage credentials are only required outside mock mode.
        """
        missing = []

        if not self.dash_user:
            missing.append("DASH_USER")
        if not self.dash_pass:
            missing.append("DASH_PASS")

        if not self.spaces_mock_mode:
            required_storage = {
                "SPACES_ACCESS_KEY": self.spaces_access_key,
                "SPACES_SECRET_KEY": self.spaces_secret_key,
                "SPACES_REGION": self.spaces_region,
                "SPACES_BUCKET": self.spaces_bucket,
                "SPACES_ENDPOINT": self.spaces_endpoint,
            }
            missing.extend(name for name, value in required_storage.items() if not value)

        return missing

    def storage_config(self) -> StorageConfig:
        """Storage client configuration derived from these settings."""
        return StorageConfig(
            access_key_id=self.spaces_access_key,
            secret_access_key=self.spaces_secret_key,
            bucket_name=self.spaces_bucket,
            endpoint_url=self.spaces_endpoint,
            region=self.spaces_region,
            read_timeout=self.catalog_list_timeout_seconds,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once per process. For tests, call
    get_settings.cache_clear() or override the dependency.
    """
    return Settings()
