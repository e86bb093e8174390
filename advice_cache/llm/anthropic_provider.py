"""
Anthropic analysis provider implementation.

Sandi Metz Principles:
- Single Responsibility: Anthropic API interaction
- Small methods: Each method < 10 lines
- Dependency Injection: API key and client injected
"""

import json
from typing import Any, Dict, List, Optional

from anthropic import AnthropicError, AsyncAnthropic

from advice_cache.config import AppConfig, config
from advice_cache.exceptions import ConfigurationError, LLMProviderError
from advice_cache.llm.cost_calculator import CostEstimator
from advice_cache.llm.provider import BaseAnalysisProvider
from advice_cache.llm.response_parser import AnalysisResponseParser
from advice_cache.llm.retry import RetryConfig, RetryHandler
from advice_cache.models.analysis import AnalysisRequest, AnalysisResponse
from advice_cache.utils.logger import get_logger, log_llm_call

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a health advisor. Analyse the user's energy, focus areas and "
    "environment and reply with a single JSON object describing today's advice."
)

JSON_PREFILL = "{"


class AnthropicAnalysisProvider(BaseAnalysisProvider):
    """
    Anthropic/Claude implementation of analysis provider.

    Sends the request context as JSON and parses the JSON reply.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        app_config: Optional[AppConfig] = None,
        client: Optional[AsyncAnthropic] = None,
        retry_handler: Optional[RetryHandler] = None,
    ):
        """
        Initialize Anthropic provider.

        Args:
            api_key: Anthropic API key (falls back to configuration)
            app_config: Configuration (uses global config if None)
            client: Optional pre-built client
            retry_handler: Optional retry handler (built from config if None)
        """
        self._config = app_config or config
        self._api_key = api_key or self._config.anthropic_api_key
        self._client = client
        self._retry_handler = retry_handler or RetryHandler(
            RetryConfig.from_app_config(self._config)
        )
        self._estimator = CostEstimator(self._config)

    async def analyze(self, request: AnalysisRequest) -> AnalysisResponse:
        """
        Generate analysis using Anthropic.

        Args:
            request: Analysis request

        Returns:
            Parsed analysis

        Raises:
            LLMProviderError: If API call fails or reply is unusable
        """
        try:
            response = await self._retry_handler.execute(
                lambda: self._make_api_call(request)
            )
        except AnthropicError as e:
            logger.error("Anthropic error", error=str(e))
            raise LLMProviderError(
                self._build_error_message(e, "Anthropic API call failed")
            ) from e

        usage = AnalysisResponseParser.extract_usage(response)
        log_llm_call(
            provider=self.get_name(),
            model=getattr(response, "model", self._config.default_model),
            tokens=usage["prompt_tokens"] + usage["completion_tokens"],
            cost=self._estimator.calculate(
                usage["prompt_tokens"], usage["completion_tokens"]
            ),
        )

        text = AnalysisResponseParser.extract_text(response)
        return AnalysisResponseParser.parse(text)

    async def _make_api_call(self, request: AnalysisRequest) -> Any:
        """
        Make Anthropic API call.

        Args:
            request: Analysis request

        Returns:
            Raw Anthropic message
        """
        client = self._get_client()
        return await client.messages.create(
            model=self._config.default_model,
            max_tokens=self._config.default_max_tokens,
            temperature=self._config.default_temperature,
            system=SYSTEM_PROMPT,
            messages=self.build_messages(request),
        )

    @staticmethod
    def build_messages(request: AnalysisRequest) -> List[Dict[str, Any]]:
        """
        Build the message list for a request.

        Args:
            request: Analysis request

        Returns:
            User turn with the context and an assistant "{" prefill
        """
        context = json.dumps(
            request.model_dump(mode="json", by_alias=True), sort_keys=True
        )
        return [
            {"role": "user", "content": f"<context>{context}</context>"},
            {"role": "assistant", "content": JSON_PREFILL},
        ]

    def get_name(self) -> str:
        """
        Get provider name.

        Returns:
            Provider name
        """
        return "anthropic"

    def _get_client(self) -> AsyncAnthropic:
        """
        Get or create Anthropic client.

        Returns:
            Anthropic async client

        Raises:
            ConfigurationError: If no API key is configured
        """
        if not self._client:
            if not self._api_key:
                raise ConfigurationError("ANTHROPIC_API_KEY is not configured")
            self._client = AsyncAnthropic(api_key=self._api_key)
        return self._client
