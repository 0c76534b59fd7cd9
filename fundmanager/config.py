"""
Configuration module for environment variables.
"""
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = Field(
        default="sqlite:///./fund_manager.db",
        description="SQLAlchemy connection URL (SQLite or PostgreSQL)"
    )
    db_pool_size: int = Field(default=5)
    db_max_overflow: int = Field(default=10)

    # Authentication
    secret_key: str = Field(
        default="CHANGE_THIS_SECRET",
        description="Key used to sign session tokens"
    )
    access_token_expire_minutes: int = Field(default=12 * 60)
    admin_username: str = Field(
        default="Ballas",
        description="Admin account seeded on startup"
    )
    admin_password: str = Field(
        default="",
        description="Password for the seeded admin; seeding is skipped when empty"
    )
    admin_display_name: str = Field(default="Administrator")
    require_admin_for_writes: bool = Field(
        default=True,
        description="Reject POST/PATCH/PUT/DELETE on entity routes unless the caller is an admin"
    )

    # Listing
    completion_history_limit: int = Field(
        default=100,
        description="Maximum number of task completions returned by the list endpoint"
    )

    # HTTP
    cors_origins: List[str] = Field(default=["*"])
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)

    # Client / CLI
    api_base_url: str = Field(
        default="http://127.0.0.1:8000",
        description="Base URL used by the command-line client"
    )
    client_poll_interval: float = Field(
        default=5.0,
        description="Seconds after which cached list reads are refetched"
    )
    cli_username: str = Field(default="", description="Admin username for the CLI; empty means guest")
    cli_password: str = Field(default="")

    # Application Settings
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    log_file: str = Field(default="")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure settings are loaded only once.
    """
    return Settings()


# Convenience function for direct access
settings = get_settings()
