"""
conlog Configuration Module.

Settings are grouped per concern, each with its own environment variable
prefix. ``CONLOG_ENV`` selects extra .env files, loaded in this order
(later overrides earlier):
    1. .env
    2. .env.local
    3. .env.{environment}
    4. .env.{environment}.local

Usage:
    from conlog.config import settings

    settings.logging.level
    settings.logging.cerr_color
"""

from functools import cached_property
import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import DiagnosticsLevel, LoggingSettings


def _get_env_files() -> tuple[str, ...]:
    """Determine which .env files to load based on CONLOG_ENV."""
    env = os.getenv("CONLOG_ENV", "development")
    return (
        ".env",
        ".env.local",
        f".env.{env}",
        f".env.{env}.local",
    )


class Settings(BaseSettings):
    """Composite settings aggregating the configuration domains."""

    model_config = SettingsConfigDict(
        env_file=_get_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @cached_property
    def logging(self) -> LoggingSettings:
        return LoggingSettings(_env_file=_get_env_files())


settings = Settings()

__all__ = ["DiagnosticsLevel", "LoggingSettings", "Settings", "settings"]
