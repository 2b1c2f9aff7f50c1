"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "srecha-invoice.db"
    documents_dir_name: str = "invoices"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 5000  # ms

    # Transient failure handling (lock contention)
    max_retries: int = 3
    retry_delay: float = 0.05  # seconds, fixed

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name

    @property
    def documents_dir(self) -> Path:
        return self.data_dir / self.documents_dir_name


class DocumentSettings(BaseSettings):
    """Rendered document storage configuration."""

    model_config = SettingsConfigDict(env_prefix="DOCUMENTS_")

    file_extension: str = ".html"
    # Refuse to store artifacts for invoice numbers that do not exist
    require_invoice: bool = False


class AuthSettings(BaseSettings):
    """Authentication configuration."""

    model_config = SettingsConfigDict(env_prefix="AUTH_")

    # Created on startup when the users table is empty
    admin_username: str | None = None
    admin_password: SecretStr | None = None
    bcrypt_rounds: int = 12


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["tauri://localhost", "http://localhost:1420"]


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Srecha Invoice Engine"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    documents: DocumentSettings = Field(default_factory=DocumentSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    api: APISettings = Field(default_factory=APISettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
