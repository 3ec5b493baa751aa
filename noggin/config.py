"""
Configuration settings for noggin.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="NOGGIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    data_dir: Path = Field(
        default=Path.home() / ".noggin",
        description="Directory holding the settings store",
    )
    settings_file: str = Field(
        default="settings.json",
        description="Key-value store file name, relative to data_dir",
    )

    # ========================================
    # Modules
    # ========================================
    source_extensions: tuple[str, ...] = Field(
        default=(".txt", ".pdf", ".md"),
        description="File extensions treated as module source material",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: str = Field(
        default="INFO",
        description="Minimum loguru level for the CLI sink",
    )

    @field_validator("source_extensions", mode="before")
    @classmethod
    def _dot_extensions(cls, value: list[str] | tuple[str, ...]) -> tuple[str, ...]:
        # NOGGIN_SOURCE_EXTENSIONS is JSON, e.g. '["txt", ".pdf"]'
        return tuple(
            ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in value
        )

    @property
    def settings_path(self) -> Path:
        """Full path of the key-value settings store."""
        return self.data_dir / self.settings_file


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
