"""Tests for analysis response parsing."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from advice_cache.exceptions import ResponseParseError
from advice_cache.llm.response_parser import AnalysisResponseParser


def _message(text: str = '"energyComment": "ok"}', input_tokens=100, output_tokens=50):
    block = MagicMock()
    block.type = "text"
    block.text = text
    message = MagicMock()
    message.content = [block]
    message.usage.input_tokens = input_tokens
    message.usage.output_tokens = output_tokens
    return message


class TestExtraction:
    """Test content and usage extraction."""

    def test_extract_text(self):
        """Test first text block is returned."""
        assert AnalysisResponseParser.extract_text(_message("abc")) == "abc"

    def test_extract_text_empty_content(self):
        """Test empty content list."""
        message = _message()
        message.content = []
        assert AnalysisResponseParser.extract_text(message) == ""

    def test_extract_usage(self):
        """Test token usage mapping."""
        usage = AnalysisResponseParser.extract_usage(_message())
        assert usage == {"prompt_tokens": 100, "completion_tokens": 50}

    def test_extract_usage_missing(self):
        """Test missing usage block."""
        message = _message()
        message.usage = None
        usage = AnalysisResponseParser.extract_usage(message)
        assert usage == {"prompt_tokens": 0, "completion_tokens": 0}


class TestParse:
    """Test JSON parsing into analyses."""

    def test_restores_prefilled_brace(self):
        """Test text continuing a '{' prefill parses."""
        analysis = AnalysisResponseParser.parse(
            '"energyComment": "Rest", "generatedAt": "2024-06-01T06:00:00"}'
        )
        assert analysis.generated_at == datetime(2024, 6, 1, 6, 0)
        assert analysis.model_dump(by_alias=True)["energyComment"] == "Rest"

    def test_full_object(self):
        """Test complete JSON object parses unchanged."""
        analysis = AnalysisResponseParser.parse('{"detailAnalysis": "fine"}')
        assert analysis.model_dump(by_alias=True)["detailAnalysis"] == "fine"

    def test_strips_code_fence(self):
        """Test fenced JSON parses."""
        text = '```json\n{"detailAnalysis": "fine"}\n```'
        analysis = AnalysisResponseParser.parse(text)
        assert analysis.model_dump(by_alias=True)["detailAnalysis"] == "fine"

    def test_fills_generated_at(self):
        """Test missing generation time defaults to now."""
        now = datetime(2024, 6, 1, 7, 0)
        analysis = AnalysisResponseParser.parse('{"detailAnalysis": "x"}', now=now)
        assert analysis.generated_at == now

    def test_empty_text(self):
        """Test empty reply is rejected."""
        with pytest.raises(ResponseParseError):
            AnalysisResponseParser.parse("   ")

    def test_invalid_json(self):
        """Test malformed JSON is rejected."""
        with pytest.raises(ResponseParseError):
            AnalysisResponseParser.parse('"headline": {')

    def test_non_object(self):
        """Test JSON arrays are rejected."""
        with pytest.raises(ResponseParseError):
            AnalysisResponseParser.parse("[1, 2]")

    def test_invalid_timestamp(self):
        """Test malformed known fields are rejected."""
        with pytest.raises(ResponseParseError):
            AnalysisResponseParser.parse('{"generatedAt": "not a date"}')
