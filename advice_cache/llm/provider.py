"""
Analysis provider base class and interface.

Sandi Metz Principles:
- Single Responsibility: Provider abstraction
- Interface Segregation: Minimal provider interface
- Dependency Inversion: Depend on abstraction, not concrete classes
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable

from advice_cache.models.analysis import AnalysisRequest, AnalysisResponse


class BaseAnalysisProvider(ABC):
    """
    Abstract base class for analysis providers.

    Defines interface that all providers must implement.
    """

    @abstractmethod
    async def analyze(self, request: AnalysisRequest) -> AnalysisResponse:
        """
        Generate analysis for request.

        Args:
            request: Analysis request

        Returns:
            Analysis response

        Raises:
            LLMProviderError: If analysis fails
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """
        Get provider name.

        Returns:
            Provider name (e.g., "anthropic")
        """
        pass

    def fresh_callback(
        self, request: AnalysisRequest
    ) -> Callable[[], Awaitable[AnalysisResponse]]:
        """
        Bind request into a zero-argument computation for the cache manager.

        Args:
            request: Analysis request

        Returns:
            Coroutine function producing a fresh analysis
        """

        async def compute() -> AnalysisResponse:
            return await self.analyze(request)

        return compute

    def _build_error_message(self, error: Exception, context: str) -> str:
        """
        Build error message with context.

        Args:
            error: The exception that occurred
            context: Context description

        Returns:
            Formatted error message
        """
        return f"{context}: {type(error).__name__} - {str(error)}"
