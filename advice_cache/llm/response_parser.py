"""
LLM response parser.

Sandi Metz Principles:
- Single Responsibility: Parse LLM output into analyses
- Small methods: Each method < 10 lines
- Clear naming: Self-documenting code
"""

import json
from datetime import datetime
from typing import Any, Dict

from pydantic import ValidationError

from advice_cache.exceptions import ResponseParseError
from advice_cache.models.analysis import AnalysisResponse


class AnalysisResponseParser:
    """
    Parser for Anthropic analysis responses.

    Handles the JSON prefill convention: the request ends with an assistant
    turn of "{", so the returned text lacks its opening brace.
    """

    @staticmethod
    def extract_text(response: Any) -> str:
        """
        Extract text from Anthropic response.

        Args:
            response: Anthropic Messages response

        Returns:
            Text of the first text block ("" if none)
        """
        for block in response.content or []:
            if getattr(block, "type", "text") == "text":
                return block.text or ""
        return ""

    @staticmethod
    def extract_usage(response: Any) -> Dict[str, int]:
        """
        Extract token usage from Anthropic response.

        Args:
            response: Anthropic response

        Returns:
            Dict with prompt_tokens and completion_tokens
        """
        usage = response.usage
        if usage is None:
            return {"prompt_tokens": 0, "completion_tokens": 0}

        return {
            "prompt_tokens": usage.input_tokens,
            "completion_tokens": usage.output_tokens,
        }

    @staticmethod
    def restore_prefill(text: str) -> str:
        """
        Re-attach the prefilled opening brace.

        Args:
            text: Raw response text

        Returns:
            Text starting with "{"
        """
        stripped = AnalysisResponseParser._strip_code_fence(text.strip())
        if stripped and not stripped.startswith("{"):
            stripped = "{" + stripped
        return stripped

    @staticmethod
    def parse(text: str, now: datetime | None = None) -> AnalysisResponse:
        """
        Parse response text into an analysis.

        Args:
            text: Raw response text
            now: Fallback generation time (defaults to datetime.now())

        Returns:
            Parsed analysis

        Raises:
            ResponseParseError: If the text is empty or not a JSON object
        """
        body = AnalysisResponseParser.restore_prefill(text)
        if not body:
            raise ResponseParseError("Empty response from LLM")

        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise ResponseParseError(f"Invalid JSON in LLM response: {e}") from e

        if not isinstance(data, dict):
            raise ResponseParseError("LLM response is not a JSON object")

        if "generatedAt" not in data and "generated_at" not in data:
            data["generatedAt"] = (now or datetime.now()).isoformat()

        try:
            return AnalysisResponse.model_validate(data)
        except ValidationError as e:
            raise ResponseParseError(f"Malformed analysis: {e}") from e

    @staticmethod
    def _strip_code_fence(text: str) -> str:
        if not text.startswith("```"):
            return text
        lines = text.splitlines()[1:]
        if lines and lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        return "\n".join(lines).strip()
