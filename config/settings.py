"""Runtime settings for stakeview, read from the environment or a .env file."""
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StakeviewSettings(BaseSettings):
    """Configuration for the preload cache and staking views."""

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level"
    )
    MOCK: bool = Field(
        default=False,
        description="Serve deterministic mock validator data instead of the network fetcher"
    )

    # Preload cache
    REDIS_URL: Optional[str] = Field(
        default=None,
        description="Redis URL for persisted preload data, takes precedence over PRELOAD_CACHE_DIR"
    )
    PRELOAD_CACHE_DIR: Optional[str] = Field(
        default=None,
        description="Directory for persisted preload data, in-memory storage when unset"
    )
    FETCH_FAILURE_THRESHOLD: int = Field(
        default=5,
        ge=1,
        description="Consecutive fetch failures before the fetch circuit opens"
    )
    FETCH_RECOVERY_TIMEOUT: float = Field(
        default=60.0,
        ge=0,
        description="Seconds before an open fetch circuit is probed again"
    )

    # Staking views
    PIN_DELEGATED_VALIDATORS: bool = Field(
        default=True,
        description="List validators already delegated to first when no search query is set"
    )
    MAX_REDELEGATIONS: int = Field(
        default=7,
        ge=0,
        description="Maximum pending redelegations per account"
    )
    MAX_UNBONDINGS: int = Field(
        default=7,
        ge=0,
        description="Maximum pending unbondings per account"
    )
    MAX_DELEGATIONS: int = Field(
        default=5,
        ge=1,
        description="Maximum validators in a single delegate transaction"
    )

    model_config = SettingsConfigDict(
        env_prefix="STAKEVIEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )


@lru_cache(maxsize=1)
def get_settings() -> StakeviewSettings:
    """Get the process-wide settings instance."""
    return StakeviewSettings()
