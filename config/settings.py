"""
Configuration settings for FocusFlow.
All sensitive values are loaded from environment variables.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "FocusFlow"
    debug: bool = Field(default=False)
    environment: str = Field(default="production")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Database (PostgreSQL)
    database_url: str = Field(default="")
    database_echo: bool = Field(default=False)
    db_pool_size: int = Field(default=5)
    db_max_overflow: int = Field(default=10)
    db_pool_timeout: int = Field(default=30)
    db_pool_recycle: int = Field(default=1800)

    # Week starts and day boundaries are computed in this timezone
    timezone: str = Field(default="UTC")

    # Capacity defaults (overridable per user)
    daily_work_hours: float = Field(default=8.0)
    context_switching_minutes: int = Field(default=20)

    # Gamification
    challenge_lookback_days: int = Field(default=14)

    # JIRA (fallback when a user has no credentials of their own)
    jira_host: str = Field(default="")
    jira_email: str = Field(default="")
    jira_api_token: str = Field(default="")
    jira_jql_query: str = Field(default='status in ("To Do", "In Progress")')
    jira_max_results: int = Field(default=50)


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the application settings."""
    return settings
