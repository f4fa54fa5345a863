"""Application configuration using Pydantic settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Local persistence
    database_url: str = "sqlite+aiosqlite:///./dispatch_board.db"
    storage_key: str = "erlc_cad_full_v2_v1"

    # Hosted table store (PostgREST / Supabase). Sync is disabled without a URL.
    remote_url: str | None = None
    remote_api_key: str | None = None
    remote_timeout_seconds: float = 10.0
    remote_webhook_secret: str | None = None  # Checked against X-Webhook-Secret
    reload_interval_minutes: int = 5  # 0 disables the fallback reload job

    # API settings
    api_v1_prefix: str = "/api/v1"
    cors_origins: list[str] = ["*"]  # Restrict in production
    rate_limit_per_minute: int = 60

    # Environment
    debug: bool = False

    @property
    def remote_enabled(self) -> bool:
        """Whether a remote table store is configured."""
        return bool(self.remote_url)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
