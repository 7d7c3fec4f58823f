"""Application settings using Pydantic Settings."""

import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_cache_dir() -> str:
    base = os.environ.get("XDG_CACHE_HOME") or "~/.cache"
    return str(Path(base) / "codeswitch")


def _default_config_path() -> str:
    base = os.environ.get("XDG_CONFIG_HOME") or "~/.config"
    return str(Path(base) / "codeswitch" / "config")


class Settings(BaseSettings):
    """Settings loaded from ``CODESWITCH_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CODESWITCH_",
        case_sensitive=False,
    )

    # General
    log_level: str = "WARNING"
    json_logs: bool = False

    # Index cache, one file per scanned root
    cache_dir: str = Field(default_factory=_default_cache_dir)

    # Per-name defaults and preference patterns
    config_path: str = Field(default_factory=_default_config_path)

    # Scanning
    scan_workers: int = Field(default=4, ge=1, le=64)
    markers: list[str] = Field(default_factory=lambda: [".git"])

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.cache_dir = str(Path(self.cache_dir).expanduser())
        self.config_path = str(Path(self.config_path).expanduser())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
