"""
Frontend configuration using Pydantic Settings.

Reads ACORD_-prefixed environment variables.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Settings for the submission client and the Streamlit page."""

    api_url: str = "http://localhost:8000"
    timeout_seconds: float = Field(default=120.0, gt=0)
    max_pages: int = Field(default=5, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="ACORD_",
        extra="ignore",
        case_sensitive=False,
    )


@lru_cache
def get_client_settings() -> ClientSettings:
    """Get cached frontend settings."""
    return ClientSettings()
