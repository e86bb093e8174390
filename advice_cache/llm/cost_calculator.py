"""
Token cost estimation for analysis requests.

Sandi Metz Principles:
- Single Responsibility: Calculate API costs
- Small methods: Each method < 10 lines
- Open/Closed: Token budget comes from configuration
"""

from typing import Optional

from advice_cache.config import AppConfig, config
from advice_cache.models.analysis import AnalysisRequest


class CostEstimator:
    """
    Estimate LLM spend from the shape of a request.

    The estimate does not depend on the provider's reported usage: a fixed
    prompt, a fixed response and a per-tag context allowance are priced at a
    flat per-token rate.
    """

    def __init__(self, app_config: Optional[AppConfig] = None):
        """
        Initialize estimator.

        Args:
            app_config: Configuration (uses global config if None)
        """
        cfg = app_config or config
        self._base_tokens = cfg.base_prompt_tokens
        self._tokens_per_tag = cfg.tokens_per_tag
        self._response_tokens = cfg.response_tokens
        self._cost_per_token = cfg.cost_per_token

    def estimate_tokens(self, request: AnalysisRequest) -> int:
        """
        Estimate total tokens for a request.

        Args:
            request: Analysis request

        Returns:
            Prompt + context + response tokens
        """
        context_tokens = request.tag_count * self._tokens_per_tag
        return self._base_tokens + context_tokens + self._response_tokens

    def estimate(self, request: AnalysisRequest) -> float:
        """
        Estimate cost of a fresh analysis.

        Args:
            request: Analysis request

        Returns:
            Cost in USD
        """
        return self.estimate_tokens(request) * self._cost_per_token

    def calculate(self, prompt_tokens: int, completion_tokens: int) -> float:
        """
        Price actual token usage at the flat rate.

        Args:
            prompt_tokens: Number of input tokens
            completion_tokens: Number of output tokens

        Returns:
            Cost in USD
        """
        return (prompt_tokens + completion_tokens) * self._cost_per_token
