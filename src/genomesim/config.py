"""Configuration loading for the simulator and its hosted backend.

Settings come from environment variables and an optional .env file. The
backend key is held as a SecretStr and never logged.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class SimulatorSettings(BaseSettings):
    """Runtime settings.

    Environment Variables:
        BACKEND_URL: Base URL of the hosted database backend. Unset means
            simulations are kept in process memory only.
        BACKEND_API_KEY: Anonymous API key sent with every backend request.
        BACKEND_TIMEOUT: Request timeout in seconds (default: 10.0)
        BACKEND_MAX_RETRIES: Attempts for transient backend failures (default: 3)
        BACKEND_RETRY_WAIT: Initial backoff between attempts (default: 0.5)
        PROCESSING_DELAY: Cosmetic pause before a simulation runs (default: 2.5)
        SIMULATION_SEED: Fixed seed for reproducible runs (default: unset)

    Example:
        >>> settings = SimulatorSettings()  # Loads from environment
        >>> settings = SimulatorSettings(_env_file=".env")
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    backend_url: str | None = Field(
        default=None,
        description="Base URL of the hosted backend",
    )
    backend_api_key: SecretStr | None = Field(
        default=None,
        description="Backend API key",
    )
    backend_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Request timeout in seconds",
    )
    backend_max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum attempts for transient backend errors",
    )
    backend_retry_wait: float = Field(
        default=0.5,
        ge=0.0,
        le=30.0,
        description="Initial wait between attempts (seconds)",
    )

    processing_delay: float = Field(
        default=2.5,
        ge=0.0,
        le=30.0,
        description="Cosmetic processing pause before running a simulation (seconds)",
    )
    simulation_seed: int | None = Field(
        default=None,
        description="Seed for reproducible simulations",
    )

    @field_validator("backend_url", mode="before")
    @classmethod
    def normalize_url(cls, v: str | None) -> str | None:
        """Strip whitespace and trailing slashes; treat blank as unset."""
        if v is None:
            return None
        v = str(v).strip().rstrip("/")
        return v or None

    def get_api_key(self) -> str | None:
        return self.backend_api_key.get_secret_value() if self.backend_api_key else None

    def __repr__(self) -> str:
        """Safe representation that never exposes the API key."""
        return (
            f"SimulatorSettings("
            f"backend_url={self.backend_url or 'not set'}, "
            f"timeout={self.backend_timeout}s, "
            f"max_retries={self.backend_max_retries}, "
            f"processing_delay={self.processing_delay}s, "
            f"seed={self.simulation_seed}, "
            f"api_key={'*****' if self.backend_api_key else 'not set'}"
            f")"
        )


@lru_cache
def get_settings() -> SimulatorSettings:
    """Get cached settings singleton.

    To reload, call get_settings.cache_clear() first.
    """
    settings = SimulatorSettings()
    logger.info("Loaded settings: %s", settings)
    return settings
