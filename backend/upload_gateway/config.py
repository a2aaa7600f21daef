"""
Application configuration using Pydantic Settings.
All environment variables are loaded here with sensible defaults.

Settings are read once at process start and never mutated afterwards.
"""
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

from upload_gateway.errors import StartupConfigurationError


DEFAULT_PORT = 8080


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # S3 / S3-compatible object storage
    aws_bucket_name: str = ""
    aws_region: Optional[str] = None  # Required, checked in load_settings()
    aws_access_key_id: Optional[str] = None  # Static credentials are optional
    aws_secret_access_key: Optional[str] = None
    aws_endpoint_url: Optional[str] = None  # e.g., http://localhost:9000 for MinIO

    # HTTP server
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT

    # Logging
    log_level: str = "INFO"

    # Environment
    environment: str = "dev"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,  # PORT="" means "use the default"
        frozen=True,
    )

    @property
    def has_static_credentials(self) -> bool:
        """True when both halves of the access key pair are configured."""
        return bool(self.aws_access_key_id and self.aws_secret_access_key)


def load_settings(**overrides) -> Settings:
    """
    Build and validate the process settings.

    Args:
        **overrides: Field values that take precedence over the environment

    Returns:
        Validated, immutable Settings instance

    Raises:
        StartupConfigurationError: If the region is missing or a value
            cannot be parsed (e.g. a non-numeric PORT)
    """
    try:
        settings = Settings(**overrides)
    except ValidationError as e:
        raise StartupConfigurationError(f"Invalid configuration: {e}") from e

    if not (settings.aws_region or "").strip():
        raise StartupConfigurationError("Missing AWS_REGION environment variable")

    return settings
