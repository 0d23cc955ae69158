from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")

    DATABASE_URL: str = "sqlite+aiosqlite:///./momentum.db"
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_ENABLED: bool = False

    # IANA zone used to decide what "today" is for badges and horizons.
    TIMEZONE: str = "UTC"

    HORIZON_DAYS: int = 90
    FREEZE_TOKENS_PER_MONTH: int = 1
    MAX_FREEZE_TOKENS: int = 3

    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: str = "http://localhost:5173"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
