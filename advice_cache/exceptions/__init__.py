"""
Custom exceptions for the application.
"""


class AppError(Exception):
    """Base exception for application errors."""

    pass


class LLMProviderError(AppError):
    """Raised when LLM provider fails."""

    pass


class ResponseParseError(LLMProviderError):
    """Raised when an LLM response cannot be parsed into an analysis."""

    pass


class CacheError(AppError):
    """Raised when cache operations fail."""

    pass


class ConfigurationError(AppError):
    """Raised when configuration is invalid."""

    pass


class BudgetExceededError(AppError):
    """Raised when a user's daily budget forbids a fresh analysis."""

    def __init__(self, user_id: str, total_cost: float, budget: float):
        super().__init__(
            f"Daily budget exceeded for user {user_id}: "
            f"${total_cost:.4f} of ${budget:.2f}"
        )
        self.user_id = user_id
        self.total_cost = total_cost
        self.budget = budget
