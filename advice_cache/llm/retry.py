"""
Retry logic for the analysis provider.

Sandi Metz Principles:
- Single Responsibility: Manage retry logic
- Small methods: Each method < 10 lines
- Dependency Injection: Configuration injected
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Tuple, Type

from anthropic import (
    APIConnectionError,
    APITimeoutError,
    InternalServerError,
    RateLimitError,
)

from advice_cache.config import AppConfig
from advice_cache.utils.logger import get_logger

logger = get_logger(__name__)

# Anthropic failures worth another attempt
TRANSIENT_ERRORS: Tuple[Type[Exception], ...] = (
    RateLimitError,
    APITimeoutError,
    APIConnectionError,
    InternalServerError,
)


@dataclass
class RetryConfig:
    """Retry configuration."""

    max_attempts: int = 3
    initial_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    retry_on: Tuple[Type[Exception], ...] = TRANSIENT_ERRORS

    @classmethod
    def from_app_config(cls, app_config: AppConfig) -> "RetryConfig":
        """
        Build retry settings from application configuration.

        Args:
            app_config: Configuration

        Returns:
            Retry configuration
        """
        return cls(
            max_attempts=app_config.llm_max_attempts,
            initial_delay=app_config.llm_retry_initial_delay,
            max_delay=app_config.llm_retry_max_delay,
        )


class RetryHandler:
    """
    Exponential backoff around a single analysis call.

    Only errors listed in RetryConfig.retry_on are retried; anything else,
    including parse failures, reaches the caller on the first attempt.
    """

    def __init__(self, config: RetryConfig | None = None):
        """
        Initialize retry handler.

        Args:
            config: Retry configuration (uses defaults if None)
        """
        self._config = config or RetryConfig()
        if self._config.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    async def execute(self, func: Callable[[], Awaitable[Any]]) -> Any:
        """
        Await func, retrying transient failures.

        Args:
            func: Zero-argument coroutine function

        Returns:
            Result of the first successful attempt

        Raises:
            Exception: The last transient error, or any other error at once
        """
        attempt = 1
        while True:
            try:
                return await func()
            except self._config.retry_on as e:
                if attempt >= self._config.max_attempts:
                    logger.error("Analysis call failed", attempts=attempt, error=str(e))
                    raise
                delay = self._calculate_delay(attempt)
                logger.warning(
                    "Transient analysis failure",
                    attempt=attempt,
                    retry_in=round(delay, 2),
                    error_type=type(e).__name__,
                )
                await asyncio.sleep(delay)
                attempt += 1

    def _calculate_delay(self, attempt: int) -> float:
        """Backoff for a 1-indexed attempt, capped at max_delay."""
        delay = self._config.initial_delay * (
            self._config.exponential_base ** (attempt - 1)
        )
        return min(delay, self._config.max_delay)
