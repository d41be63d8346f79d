"""
Application configuration models and helpers.

Centralizes settings management so the credential vault, the storage retry
policy, the HTTP surface and the command-line tools share one configuration
surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class StorageSettings(BaseSettings):
    """Where and how account credentials are persisted."""

    model_config = SettingsConfigDict(env_prefix="AUTHCHAIN_STORAGE_")

    db_path: str = Field(
        "data/credentials.db",
        description="SQLite database holding encrypted credential records.",
    )
    encryption_secret: Optional[str] = Field(
        None,
        description=(
            "Secret used to derive the symmetric key for encrypting stored credentials."
        ),
    )
    accounts_file: str = Field(
        "data/accounts.json",
        description="JSON file holding the account registry.",
    )


class RetrySettings(BaseSettings):
    """Write-then-verify retry policy for credential storage."""

    model_config = SettingsConfigDict(env_prefix="AUTHCHAIN_RETRY_")

    max_attempts: int = Field(3, ge=1)
    base_delay_ms: int = Field(100, ge=0)

    @property
    def base_delay_seconds(self) -> float:
        return self.base_delay_ms / 1000


class AppSettings(BaseSettings):
    """Root settings object for the credential service."""

    model_config = SettingsConfigDict(
        env_prefix="AUTHCHAIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = Field("development")
    log_level: str = Field("INFO")
    storage: StorageSettings = Field(default_factory=StorageSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        """Accept log levels in any case."""
        return value.strip().upper()


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()


__all__ = [
    "AppSettings",
    "RetrySettings",
    "StorageSettings",
    "get_settings",
]
