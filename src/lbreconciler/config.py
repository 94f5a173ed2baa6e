"""Configuration management with validation.

Backoff settings for the provisioning poller are named constants so the
poller can be exercised with compressed timings in tests.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .poller import Backoff


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    pass


# Exponential backoff for reaching ACTIVE provisioning status. Starting with
# 1 second, multiplying by 1.2 with each step and taking 22 attempts at maximum
# it sleeps about 225s in total before timing out, plus the time spent in
# the status requests themselves.
LOADBALANCER_ACTIVE_INIT_DELAY_SECONDS = 1.0
LOADBALANCER_ACTIVE_FACTOR = 1.2
LOADBALANCER_ACTIVE_STEPS = 22

MAX_BACKOFF_STEPS = 100
MAX_BACKOFF_FACTOR = 10.0

# Spec files are small YAML documents
MAX_SPEC_FILE_SIZE_BYTES = 64 * 1024

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ReconcilerConfig:
    """Reconciler configuration loaded from environment variables.

    All fields are validated at construction time. Invalid configurations
    raise ConfigurationError immediately rather than failing mid-pass.
    """

    active_init_delay_seconds: float = LOADBALANCER_ACTIVE_INIT_DELAY_SECONDS
    active_factor: float = LOADBALANCER_ACTIVE_FACTOR
    active_steps: int = LOADBALANCER_ACTIVE_STEPS

    log_level: str = "INFO"
    log_json: bool = True

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        errors: list[str] = []

        if self.active_init_delay_seconds <= 0:
            errors.append(
                f"LB_ACTIVE_INIT_DELAY must be positive: {self.active_init_delay_seconds}"
            )

        if not (1.0 <= self.active_factor <= MAX_BACKOFF_FACTOR):
            errors.append(
                f"LB_ACTIVE_FACTOR must be between 1.0 and {MAX_BACKOFF_FACTOR}: "
                f"{self.active_factor}"
            )

        if not (1 <= self.active_steps <= MAX_BACKOFF_STEPS):
            errors.append(
                f"LB_ACTIVE_STEPS must be between 1 and {MAX_BACKOFF_STEPS}: {self.active_steps}"
            )

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"LOG_LEVEL must be one of {VALID_LOG_LEVELS}: {self.log_level}")

        if errors:
            error_msg = "Configuration validation failed:\n  - " + "\n  - ".join(errors)
            raise ConfigurationError(error_msg)

    @property
    def log_level_value(self) -> int:
        """Numeric logging level."""
        return logging.getLevelName(self.log_level.upper())

    def backoff(self) -> Backoff:
        """Build the poller backoff schedule from this configuration."""
        # Import here to avoid circular import
        from .poller import Backoff

        return Backoff(
            initial_delay_seconds=self.active_init_delay_seconds,
            factor=self.active_factor,
            steps=self.active_steps,
        )

    @classmethod
    def from_env(cls) -> ReconcilerConfig:
        """Load configuration from environment variables.

        Environment Variables:
            LB_ACTIVE_INIT_DELAY: First poll delay in seconds (default: 1.0)
            LB_ACTIVE_FACTOR: Delay multiplier per step (default: 1.2)
            LB_ACTIVE_STEPS: Maximum poll attempts (default: 22)
            LOG_LEVEL: Logging level (default: INFO)
            LOG_JSON: If "false", log plain text instead of JSON (default: true)
        """

        def get_int(key: str, default: int) -> int:
            value = os.environ.get(key)
            if value is None:
                return default
            try:
                return int(value)
            except ValueError as e:
                raise ConfigurationError(f"{key} must be an integer: {value}") from e

        def get_float(key: str, default: float) -> float:
            value = os.environ.get(key)
            if value is None:
                return default
            try:
                return float(value)
            except ValueError as e:
                raise ConfigurationError(f"{key} must be a number: {value}") from e

        def get_bool(key: str, default: bool) -> bool:
            value = os.environ.get(key, "").lower()
            if not value:
                return default
            return value in ("true", "1", "yes")

        return cls(
            active_init_delay_seconds=get_float(
                "LB_ACTIVE_INIT_DELAY", LOADBALANCER_ACTIVE_INIT_DELAY_SECONDS
            ),
            active_factor=get_float("LB_ACTIVE_FACTOR", LOADBALANCER_ACTIVE_FACTOR),
            active_steps=get_int("LB_ACTIVE_STEPS", LOADBALANCER_ACTIVE_STEPS),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
            log_json=get_bool("LOG_JSON", True),
        )
