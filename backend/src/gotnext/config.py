"""Application configuration via pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Settings
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS - comma-separated origins (env var: CORS_ORIGINS)
    cors_origins: str = "http://localhost:8081,http://127.0.0.1:8081"

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Rotation
    bench_depth: int = 3
    random_seed: int | None = None  # Fix for reproducible court shuffles

    # Hosted sessions
    session_ttl_seconds: int = 60 * 60
    session_cleanup_interval_seconds: int = 60

    # Remote queue mirror (optional; the rotation never depends on it)
    enable_remote_queue: bool = False
    remote_queue_url: str = "http://localhost:8080/api/queue"
    remote_queue_timeout: float = 10.0

    # Preferred display names
    name_store_path: str = "data/display_names.json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_name_store_path(path: str | None = None) -> Path:
    """Resolve the display-name file, relative paths from the repo root."""
    resolved = Path(path or settings.name_store_path)
    if resolved.is_absolute():
        return resolved
    repo_root = Path(__file__).parent.parent.parent.parent
    return repo_root / resolved
