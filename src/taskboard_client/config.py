"""Configuration management."""

import logging
from functools import cache

from pydantic import ConfigDict, Field, computed_field
from pydantic_settings import BaseSettings

from .consts import CLIENT_NAME, REFRESH_URL_PATH, TOKEN_URL_PATH


class Config(BaseSettings):
    """Configuration with computed API endpoints."""

    model_config = ConfigDict(
        env_prefix="TASKBOARD_", case_sensitive=False, extra="ignore"
    )
    base_url: str = Field(
        default="http://127.0.0.1:8000",
        description="Base URL of the task management API",
    )
    credentials_file: str = Field(
        default="~/.taskboard/credentials.json",
        description="Path to the JSON file holding stored credentials",
    )
    log_level: str = Field(
        default="INFO",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
        description="Logging level",
    )
    timeout_seconds: int = Field(
        default=30, gt=0, le=300, description="HTTP request timeout in seconds"
    )
    rotate_refresh_credential: bool = Field(
        default=True,
        description="Persist a new refresh credential when the server rotates it",
    )
    login_path: str = Field(
        default="/login",
        pattern=r"^/",
        description="Unauthenticated entry point the UI is sent to on logout",
    )

    @computed_field
    @property
    def token_url(self) -> str:
        """URL for obtaining a credential pair."""
        return f"{self.base_url.rstrip('/')}{TOKEN_URL_PATH}"

    @computed_field
    @property
    def refresh_url(self) -> str:
        """URL for exchanging a refresh credential."""
        return f"{self.base_url.rstrip('/')}{REFRESH_URL_PATH}"


@cache
def get_config() -> Config:
    """Get a cached Config instance."""
    return Config()


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """Configure logging for the entire application"""
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,  # Override any existing configuration
    )
    return logging.getLogger(CLIENT_NAME)
