"""Configuration loading for the retry kit."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from retry_kit.constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_SUCCESS_RATE,
    LOG_LEVELS,
)


@dataclass
class Config:
    """Application configuration loaded from environment."""

    max_attempts: int
    success_rate: float
    log_level: str


class ConfigError(Exception):
    """Raised when configuration values are invalid."""
    pass


def load_config() -> Config:
    """
    Load configuration from environment variables.

    Reads RETRYKIT_MAX_ATTEMPTS, RETRYKIT_SUCCESS_RATE and RETRYKIT_LOG_LEVEL,
    falling back to the defaults in constants.py when unset.

    Returns:
        Config object with validated values.

    Raises:
        ConfigError: If a variable is set but malformed or out of range.
    """
    load_dotenv()

    raw_attempts = os.environ.get("RETRYKIT_MAX_ATTEMPTS")
    raw_rate = os.environ.get("RETRYKIT_SUCCESS_RATE")
    log_level = os.environ.get("RETRYKIT_LOG_LEVEL") or DEFAULT_LOG_LEVEL

    errors = []

    max_attempts = DEFAULT_MAX_ATTEMPTS
    if raw_attempts:
        try:
            max_attempts = int(raw_attempts)
        except ValueError:
            errors.append(f"RETRYKIT_MAX_ATTEMPTS must be an integer, got {raw_attempts!r}")
        else:
            if max_attempts < 1:
                errors.append("RETRYKIT_MAX_ATTEMPTS must be at least 1")

    success_rate = DEFAULT_SUCCESS_RATE
    if raw_rate:
        try:
            success_rate = float(raw_rate)
        except ValueError:
            errors.append(f"RETRYKIT_SUCCESS_RATE must be a number, got {raw_rate!r}")
        else:
            if not 0.0 <= success_rate <= 1.0:
                errors.append("RETRYKIT_SUCCESS_RATE must be between 0 and 1")

    if log_level.upper() not in LOG_LEVELS:
        errors.append(
            f"RETRYKIT_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}"
        )

    if errors:
        raise ConfigError(
            "Invalid configuration:\n"
            + "\n".join(f"  - {e}" for e in errors)
            + "\nFix your environment or .env file."
        )

    return Config(
        max_attempts=max_attempts,
        success_rate=success_rate,
        log_level=log_level.upper(),
    )
