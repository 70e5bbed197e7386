"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set the remote store
URL and API key explicitly.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class OutboxSettings(BaseSettings):
    """Outbox queue and retry settings.

    Environment variables:
        VISITANTES_OUTBOX_STORAGE_KEY: Key the queue is stored under (default: outbox:v1)
        VISITANTES_OUTBOX_STORAGE_PATH: JSON file backing the storage (default: .outbox/storage.json)
        VISITANTES_OUTBOX_TARGET: Remote table jobs are delivered to (default: visitantes)
        VISITANTES_OUTBOX_BACKOFF_BASE_SECONDS: Backoff base delay (default: 1.0)
        VISITANTES_OUTBOX_BACKOFF_MAX_SECONDS: Backoff upper bound (default: 10.0)
        VISITANTES_OUTBOX_MAX_ATTEMPTS: Attempts before quarantine (default: 8)
        VISITANTES_OUTBOX_SAVE_RETRIES: Extra attempts for a failed save (default: 2)
    """

    model_config = SettingsConfigDict(
        env_prefix="VISITANTES_OUTBOX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    storage_key: str = Field(default="outbox:v1", description="Storage key")
    storage_path: Path = Field(
        default=Path(".outbox/storage.json"),
        description="JSON file backing the durable storage",
    )
    target: str = Field(default="visitantes", description="Remote table name")
    backoff_base_seconds: float = Field(
        default=1.0,
        description="Backoff base delay in seconds",
        gt=0,
    )
    backoff_max_seconds: float = Field(
        default=10.0,
        description="Backoff upper bound in seconds",
        gt=0,
    )
    max_attempts: int = Field(
        default=8,
        description="Delivery attempts before a job is quarantined",
        ge=1,
        le=100,
    )
    save_retries: int = Field(
        default=2,
        description="Extra attempts for a failed save",
        ge=0,
        le=10,
    )

    @model_validator(mode="after")
    def validate_backoff_settings(self) -> "OutboxSettings":
        """Validate backoff max >= base."""
        if self.backoff_max_seconds < self.backoff_base_seconds:
            raise ValueError(
                f"backoff_max_seconds ({self.backoff_max_seconds}) must be >= "
                f"backoff_base_seconds ({self.backoff_base_seconds})"
            )
        return self


class RemoteStoreSettings(BaseSettings):
    """Remote store connection settings.

    Environment variables:
        VISITANTES_REMOTE_URL: Project URL of the PostgREST API (default: http://localhost:54321)
        VISITANTES_REMOTE_API_KEY: API key (required in production)
        VISITANTES_REMOTE_TIMEOUT_SECONDS: Request timeout (default: 10.0)
    """

    model_config = SettingsConfigDict(
        env_prefix="VISITANTES_REMOTE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str = Field(default="http://localhost:54321", description="Project URL")
    api_key: SecretStr = Field(default=SecretStr(""), description="API key")
    timeout_seconds: float = Field(
        default=10.0,
        description="Request timeout in seconds",
        gt=0,
    )


class ConnectivitySettings(BaseSettings):
    """Connectivity monitoring settings.

    Environment variables:
        VISITANTES_CONNECTIVITY_PROBE_URL: URL polled for reachability (default: unset, manual signals)
        VISITANTES_CONNECTIVITY_INTERVAL_SECONDS: Delay between checks (default: 15.0)
        VISITANTES_CONNECTIVITY_TIMEOUT_SECONDS: Per-check timeout (default: 5.0)
    """

    model_config = SettingsConfigDict(
        env_prefix="VISITANTES_CONNECTIVITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    probe_url: str | None = Field(default=None, description="Reachability URL")
    interval_seconds: float = Field(
        default=15.0,
        description="Delay between checks in seconds",
        gt=0,
    )
    timeout_seconds: float = Field(
        default=5.0,
        description="Per-check timeout in seconds",
        gt=0,
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Visitantes Outbox", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def outbox(self) -> OutboxSettings:
        """Get outbox settings."""
        return get_outbox_settings()

    @property
    def remote(self) -> RemoteStoreSettings:
        """Get remote store settings."""
        return get_remote_store_settings()

    @property
    def connectivity(self) -> ConnectivitySettings:
        """Get connectivity settings."""
        return get_connectivity_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_outbox_settings() -> OutboxSettings:
    """Get cached outbox settings."""
    return OutboxSettings()


@lru_cache
def get_remote_store_settings() -> RemoteStoreSettings:
    """Get cached remote store settings."""
    return RemoteStoreSettings()


@lru_cache
def get_connectivity_settings() -> ConnectivitySettings:
    """Get cached connectivity settings."""
    return ConnectivitySettings()
