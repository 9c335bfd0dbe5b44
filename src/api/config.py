"""Configuration settings for the Cloud Snippets API."""

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Google Cloud project the DLP requests are billed to
    gcp_project_id: str = ""

    # Client transport: "grpc" or "rest"
    client_transport: str = "grpc"

    # Service-account key file; empty means Application Default Credentials
    google_application_credentials: str = ""

    # CORS settings
    cors_origins: str = "*"

    # Rate limiting
    rate_limit: str = "100/minute"

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("client_transport")
    @classmethod
    def _check_transport(cls, value: str) -> str:
        value = value.lower()
        if value not in ("grpc", "rest"):
            raise ValueError("client_transport must be 'grpc' or 'rest'")
        return value

    @property
    def credentials_file(self) -> Optional[str]:
        """Service-account file to use, or None for ADC."""
        return self.google_application_credentials or None

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]


# Global settings instance
settings: Optional[Settings] = None


def load_settings() -> Settings:
    """Load settings from environment variables and .env file."""
    global settings
    settings = Settings()
    return settings


def get_settings() -> Settings:
    """Get the global settings instance, loading if necessary."""
    global settings
    if settings is None:
        settings = load_settings()
    return settings
