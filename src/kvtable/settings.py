"""
kvtable.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide env-driven settings for the engine, logging and HTTP layers.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="KVTABLE_", case_sensitive=False)

    # Environment only changes log verbosity defaults and test wiring.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "kvtable"
    log_level: str = "INFO"

    api_host: str = "127.0.0.1"
    api_port: int = 8080

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./test.sqlite"

    # Table served by the bare `POST /{key}/{value}` route.
    default_table: str = Field(default="user_emails", max_length=64)
    auto_create_table: bool = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Tests construct `Settings(...)` directly instead of going through the cache.
