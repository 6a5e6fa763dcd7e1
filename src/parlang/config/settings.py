"""Checker settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CheckerSettings(BaseSettings):
    """Static-analysis pass settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PARLANG_CHECKER_",
        case_sensitive=False,
        extra="ignore",
    )

    check_exhaustiveness: bool = Field(default=True)
    log_warnings: bool = Field(default=True)


def load_settings(**overrides: bool) -> CheckerSettings:
    """Load settings from the environment, with optional explicit overrides."""
    return CheckerSettings(**overrides)
