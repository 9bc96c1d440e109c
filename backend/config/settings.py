"""
Centralized configuration management using Pydantic Settings.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field, field_validator
from typing import Optional, List, Union
from pathlib import Path


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application
    app_name: str = "Anonymous Message Board"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("APP_ENV", "environment"),
    )

    # Database
    # Default to a local SQLite DB for development if DATABASE_URL is not provided
    database_url: str = f"sqlite:///{Path(__file__).resolve().parent.parent.parent}/messageboard.db"
    pool_size: int = 5
    max_overflow: int = 10
    pool_pre_ping: bool = True

    # CORS
    cors_origins: Union[str, List[str]] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = False
    cors_allow_methods: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Board listing
    thread_list_limit: int = 10
    reply_preview_limit: int = 3

    # Optimistic concurrency: how many times a read-modify-write is re-run
    # after a stale board version or a board-name collision.
    save_conflict_retries: int = 3

    @field_validator("cors_origins", mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            if not v:  # Handle empty string
                return ["*"]
            return [origin.strip() for origin in v.split(",")]
        elif v is None:
            return ["*"]
        return v

    @field_validator("thread_list_limit", "reply_preview_limit")
    @classmethod
    def ensure_positive_limit(cls, v):
        if v < 1:
            raise ValueError("listing limits must be at least 1")
        return v

    @field_validator("save_conflict_retries")
    @classmethod
    def ensure_non_negative_retries(cls, v):
        if v < 0:
            raise ValueError("save_conflict_retries cannot be negative")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Singleton instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the settings singleton instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from environment (useful for testing)."""
    global _settings
    _settings = Settings()
    return _settings

