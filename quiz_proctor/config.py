"""Runtime settings loaded from the environment (prefix ``QUIZ_PROCTOR_``)."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from quiz_proctor.constants.network_constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_SERVER_URL,
)


class AppSettings(BaseSettings):
    """Settings shared by the API server and the student client."""

    model_config = SettingsConfigDict(
        env_prefix="QUIZ_PROCTOR_",
        env_file=".env",
        extra="ignore",
    )

    host: str = Field(default=DEFAULT_HOST, description="Interface the API server binds to")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="API server port")
    log_level: str = Field(default="INFO", description="Root logging level")
    server_url: str = Field(default=DEFAULT_SERVER_URL, description="Server URL used by the student client")
    request_timeout_seconds: float = Field(default=DEFAULT_REQUEST_TIMEOUT_SECONDS, gt=0)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached singleton `AppSettings` instance."""
    return AppSettings()
