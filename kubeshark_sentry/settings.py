"""HTTP tuning for the DSN fetch, using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KUBESHARK_SENTRY_",
        case_sensitive=False,
        extra="ignore",
    )

    # Retry policy
    retry_max: int = Field(
        default=3,
        ge=0,
        description="Additional attempts after the first one on transient failures",
    )
    retry_wait_min: float = Field(
        default=1.0,
        ge=0,
        description="Base backoff in seconds",
    )
    retry_wait_max: float = Field(
        default=30.0,
        ge=0,
        description="Upper bound for a single backoff in seconds",
    )

    # Per-attempt timeout
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for each HTTP attempt",
    )
