from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration.

    Values can be overridden via environment variables prefixed with `PHYSIOSIM_`.
    Example: `PHYSIOSIM_DATABASE_URL=sqlite:////var/lib/physiosim/app.db`.
    """

    model_config = SettingsConfigDict(env_prefix="PHYSIOSIM_", env_file=".env", extra="ignore")

    # Database
    database_url: str = "sqlite:///data/app.db"
    sql_echo: bool = False

    # SQLite connection pragmas
    sqlite_busy_timeout_ms: int = 5000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
