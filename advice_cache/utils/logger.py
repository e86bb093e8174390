"""
Structured logging configuration.

Following Sandi Metz principles:
- Single Responsibility: Logging setup and configuration
- Small functions: Each setup step isolated
- Clear naming: Descriptive function names
"""

import logging
import sys
from typing import Any

import structlog


def setup_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """
    Configure structured logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render JSON lines instead of console output
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structured logger
    """
    return structlog.get_logger(name)


def log_cache_hit(cache_key: str, source: str, **kwargs: Any) -> None:
    """
    Log cache hit.

    Args:
        cache_key: Context key of the request
        source: Cache tier (memory_cache/adapted_cache)
        **kwargs: Additional context
    """
    logger = get_logger("cache")
    logger.info("cache_hit", cache_key=cache_key, source=source, **kwargs)


def log_cache_miss(cache_key: str, **kwargs: Any) -> None:
    """
    Log cache miss.

    Args:
        cache_key: Context key of the request
        **kwargs: Additional context
    """
    logger = get_logger("cache")
    logger.info("cache_miss", cache_key=cache_key, **kwargs)


def log_llm_call(provider: str, model: str, tokens: int, **kwargs: Any) -> None:
    """
    Log LLM API call.

    Args:
        provider: LLM provider name
        model: Model name
        tokens: Total tokens used
        **kwargs: Additional context
    """
    logger = get_logger("llm")
    logger.info("llm_call", provider=provider, model=model, tokens=tokens, **kwargs)


def log_budget_exceeded(
    user_id: str, total_cost: float, budget: float, **kwargs: Any
) -> None:
    """
    Log a daily budget overrun.

    Args:
        user_id: User whose spend crossed the budget
        total_cost: Spend so far today
        budget: Daily budget
        **kwargs: Additional context
    """
    logger = get_logger("cost")
    logger.warning(
        "daily_budget_exceeded",
        user_id=user_id,
        total_cost=round(total_cost, 4),
        budget=budget,
        **kwargs,
    )


def log_error(error: Exception, context: str, **kwargs: Any) -> None:
    """
    Log error with context.

    Args:
        error: Exception that occurred
        context: Error context
        **kwargs: Additional context
    """
    logger = get_logger("error")
    logger.error(
        "error_occurred",
        error=str(error),
        error_type=type(error).__name__,
        context=context,
        **kwargs
    )
