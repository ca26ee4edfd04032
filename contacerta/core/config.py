"""
Application configuration module.

Provides centralized, environment-safe configuration management
with sensible defaults for the backend, the HTTP surface and the
client-side organization session.
"""

import logging
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables.
    Environment variables should be prefixed with CONTACERTA_.

    Attributes:
        app_name: Application name.
        app_version: Application version.
        environment: Deployment environment name.
        debug: Debug mode flag.
        log_level: Logging level.
        log_format: "json" for production, "console" for development.
        database_url: SQLAlchemy URL of the reference backend database.
        backend_url: Base URL used by the HTTP backend client.
        storage_path: File holding durable client-side storage.
        search_debounce_ms: Delay applied to search inputs before re-fetching.
        revalidate_active_org: Check switches and restored pointers against
            the organization directory.
    """

    # Application metadata
    app_name: str = Field(default="ContaCerta Church Administration API")
    app_version: str = Field(default="1.0.0")
    environment: str = Field(default="development")
    debug: bool = Field(default=False)

    # Logging configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    # Reference backend
    database_url: str = Field(default="sqlite:///./contacerta.db")

    # HTTP backend client
    backend_url: str = Field(default="http://localhost:8000")
    backend_timeout_seconds: float = Field(default=10.0, gt=0)

    # Token verification (tokens are issued by the auth collaborator)
    jwt_secret_key: str = Field(default="change-me-in-production-min-32-characters")
    jwt_algorithm: str = Field(default="HS256")
    jwt_issuer: str = Field(default="contacerta-auth")
    jwt_audience: str = Field(default="contacerta-api")
    access_token_expire_minutes: int = Field(default=60, ge=1)

    # Durable client storage
    storage_path: str = Field(default=".contacerta/storage.json")
    storage_key_prefix: str = Field(default="contacerta:org:")

    # Data views
    search_debounce_ms: int = Field(default=250, ge=0)
    revalidate_active_org: bool = Field(default=True)

    # CORS
    cors_origins: str = Field(default="*")

    model_config = {
        "env_prefix": "CONTACERTA_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cors_origins_list(self) -> list[str]:
        """Split the comma separated CORS origins."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def search_debounce_seconds(self) -> float:
        return self.search_debounce_ms / 1000

    @property
    def storage_file(self) -> Path:
        """
        Resolve the durable storage file.

        Relative paths are resolved against the current working directory.
        """
        return Path(self.storage_path).expanduser().resolve()


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        logger.info(
            "Settings loaded: app_name=%s, environment=%s, debug=%s",
            _settings.app_name,
            _settings.environment,
            _settings.debug,
        )
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next access re-reads the environment."""
    global _settings
    _settings = None
