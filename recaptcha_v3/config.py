"""
Configuration management for reCAPTCHA v3 verification.

Uses pydantic-settings for type-safe configuration with environment variable support.
All values can be supplied as keyword arguments or as RECAPTCHA_* variables.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from recaptcha_v3.constants import (
    DEFAULT_ERROR_MESSAGE,
    DEFAULT_THRESHOLD,
    FORBIDDEN,
    MAX_SCORE,
    MIN_SCORE,
    RECAPTCHA_API,
)
from recaptcha_v3.exceptions import ConfigurationError


def check_secret_key(value) -> str:
    """Return the trimmed secret key or raise ConfigurationError."""
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError("Invalid secret key: it must be a non-empty string")
    return value.strip()


def check_threshold(value) -> float:
    """
    Validate a score threshold.

    Booleans are rejected even though they are ints in Python. NaN fails the
    range check.

    Raises:
        ConfigurationError: if the value is not a number in [0, 1]
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError("Invalid score threshold: it must be a number between 0 and 1")
    if not MIN_SCORE <= value <= MAX_SCORE:
        raise ConfigurationError("Invalid score threshold: it must be a number between 0 and 1")
    return float(value)


class ReCaptchaV3Settings(BaseSettings):
    """reCAPTCHA v3 settings loaded from RECAPTCHA_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RECAPTCHA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    secret_key: str  # Required: Set RECAPTCHA_SECRET_KEY in .env
    threshold: float = DEFAULT_THRESHOLD
    status_code: int = FORBIDDEN
    message: str = DEFAULT_ERROR_MESSAGE
    api_endpoint: str = RECAPTCHA_API

    @field_validator("secret_key", mode="before")
    @classmethod
    def validate_secret_key(cls, v):
        return check_secret_key(v)

    @field_validator("threshold", mode="before")
    @classmethod
    def validate_threshold(cls, v):
        """
        Parse string values coming from the environment, then range-check.

        ReCaptchaV3 checks keyword thresholds before they get here, so only
        env and .env values are parsed from strings.
        """
        if isinstance(v, str):
            try:
                v = float(v.strip())
            except ValueError:
                raise ConfigurationError(
                    "Invalid score threshold: it must be a number between 0 and 1"
                ) from None
        return check_threshold(v)


@lru_cache()
def get_settings() -> ReCaptchaV3Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return ReCaptchaV3Settings()


class LoggingSettings(BaseSettings):
    """Logging settings, kept apart so logging can be set up without a secret key."""

    model_config = SettingsConfigDict(
        env_prefix="RECAPTCHA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    log_file: Optional[Path] = None
