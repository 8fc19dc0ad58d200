"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): one Settings instance per process
    - Components receive the values they need through their constructors, never
      by calling get_settings() themselves
    - DATABASE_URL may use the plain postgresql:// scheme; it is rewritten for asyncpg

Design Decisions:
    - Defaults work for docker-compose; TOKEN_SECRET must be overridden in deployments
    - Tests build Settings(...) directly and override the get_settings dependency
"""

from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from marketplace.core.domain_types import MAX_IMAGES_PER_LISTING


class Settings(BaseSettings):
    """Marketplace settings, read from the environment (or .env)."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # ─── Persistence ────────────────────────────────────────────
    database_url: str = "postgresql+asyncpg://market:market@db:5432/market"
    database_pool_size: int = Field(20, ge=1)
    database_max_overflow: int = Field(10, ge=0)

    # ─── Image files ────────────────────────────────────────────
    images_path: str = "images"
    images_url_prefix: str = "/api/images"
    max_images_per_listing: int = Field(MAX_IMAGES_PER_LISTING, ge=0)

    # ─── Accounts ───────────────────────────────────────────────
    token_secret: str = "change-me"
    token_ttl_minutes: int = Field(60 * 24, gt=0)
    password_hash_iterations: int = Field(260_000, ge=1)

    # ─── HTTP / logging ─────────────────────────────────────────
    cors_origins: list[str] = ["http://localhost:3000"]
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_asyncpg_driver(cls, v: str) -> str:
        if isinstance(v, str) and v.startswith("postgresql://"):
            return "postgresql+asyncpg://" + v[len("postgresql://"):]
        return v

    @property
    def images_dir(self) -> Path:
        return Path(self.images_path)

    @property
    def token_ttl(self) -> timedelta:
        return timedelta(minutes=self.token_ttl_minutes)


@lru_cache
def get_settings() -> Settings:
    return Settings()
