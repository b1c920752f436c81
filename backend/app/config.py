"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite+aiosqlite:///./travel_plans.db"
    auto_create_tables: bool = True

    # Generation provider (any OpenAI-compatible endpoint)
    generation_api_key: SecretStr | None = None
    generation_model: str = "gemma-3-27b-it"
    generation_base_url: str | None = None
    generation_temperature: float = Field(0.7, ge=0.0, le=2.0)
    # 30 days x 4 blocks of summary+detail fits comfortably
    generation_max_tokens: int = Field(8192, gt=0)
    generation_timeout_seconds: float = Field(60.0, gt=0)

    # Persistence
    persistence_max_pending: int = Field(100, gt=0)
    persistence_drain_timeout_seconds: float = 10.0
    plans_public_by_default: bool = True

    # HTTP
    allowed_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    # Logging
    log_level: str = "INFO"

    @property
    def cors_origins(self) -> list[str]:
        """Allowed CORS origins as a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
