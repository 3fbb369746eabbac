# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Application configuration via environment variables and .env files."""

import re
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_TABLE_PREFIX_RE = re.compile(r"^[A-Za-z0-9_]*$")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TRANSIENTCACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
    )

    # Database
    db_path: Path = Path("transientcache.db")
    auto_migrate: bool = True
    db_backend: str = "sqlite"
    table_prefix: str = "wp_"

    @field_validator("table_prefix")
    @classmethod
    def _check_table_prefix(cls, v: str) -> str:
        if not _TABLE_PREFIX_RE.match(v):
            raise ValueError("table_prefix may only contain letters, digits and underscores")
        return v

    # Cache
    default_ttl: int = 0  # seconds, 0 = never expires

    @field_validator("default_ttl")
    @classmethod
    def _check_default_ttl(cls, v: int) -> int:
        if v < 0:
            raise ValueError("default_ttl must not be negative")
        return v

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"


def get_settings() -> Settings:
    return Settings()
