"""
Integration tests for the analysis cache flow.

Tests the full lookup including:
- Anthropic provider with a mocked client
- Memory and adapted tiers
- Timer-driven eviction
- Cost accounting
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from advice_cache.config import AppConfig
from advice_cache.exceptions import ResponseParseError
from advice_cache.llm.anthropic_provider import AnthropicAnalysisProvider
from advice_cache.llm.retry import RetryConfig, RetryHandler
from advice_cache.models.cache_entry import CacheSource
from advice_cache.services.cache_manager import IntelligentCacheManager
from tests.mocks.factories import make_request

REPLY = (
    '"headline": {"title": "Pace yourself", "impactLevel": "medium"}, '
    '"energyComment": "Energy is moderate.", "tagInsights": []}'
)


class TestCacheFlow:
    """Integration tests for provider plus cache manager."""

    @pytest.fixture
    def mock_client(self):
        """Create mock Anthropic client."""
        block = MagicMock(type="text", text=REPLY)
        message = MagicMock(content=[block], model="claude-sonnet-4-20250514")
        message.usage.input_tokens = 1500
        message.usage.output_tokens = 700

        client = MagicMock()
        client.messages.create = AsyncMock(return_value=message)
        return client

    @pytest.fixture
    def flow_config(self):
        """Create configuration with a one second TTL."""
        return AppConfig(anthropic_api_key="test-key", fresh_ttl_seconds=1)

    @pytest.fixture
    def provider(self, mock_client, flow_config):
        """Create provider around the mock client."""
        return AnthropicAnalysisProvider(
            app_config=flow_config,
            client=mock_client,
            retry_handler=RetryHandler(RetryConfig(max_attempts=1)),
        )

    @pytest.mark.asyncio
    async def test_full_flow(self, provider, mock_client, flow_config):
        """Test fresh, memory and adapted answers share one API call."""
        async with IntelligentCacheManager.create(app_config=flow_config) as manager:
            first = make_request(battery_level=42)
            near = make_request(battery_level=44)
            similar = make_request(battery_level=57)

            fresh = await manager.get_analysis(first, provider.fresh_callback(first))
            memory = await manager.get_analysis(near, provider.fresh_callback(near))
            adapted = await manager.get_analysis(
                similar, provider.fresh_callback(similar), user_id="u1"
            )

            assert fresh.source == CacheSource.FRESH_ANALYSIS
            assert memory.source == CacheSource.MEMORY_CACHE
            assert adapted.source == CacheSource.ADAPTED_CACHE
            assert mock_client.messages.create.await_count == 1

            body = adapted.analysis.model_dump(by_alias=True)
            assert body["headline"]["title"] == "Pace yourself"

            report = manager.get_daily_cost_report()
            assert report.total_requests == 1
            assert report.total_cost == pytest.approx(fresh.cost)

    @pytest.mark.asyncio
    async def test_entry_evicted_after_ttl(self, provider, mock_client, flow_config):
        """Test the eviction timer removes entries and forces a new call."""
        manager = IntelligentCacheManager.create(app_config=flow_config)
        request = make_request()

        await manager.get_analysis(request, provider.fresh_callback(request))
        assert manager.store.size == 1

        await asyncio.sleep(1.2)

        assert manager.store.size == 0
        assert manager.store.pending_evictions == 0

        result = await manager.get_analysis(request, provider.fresh_callback(request))
        assert result.source == CacheSource.FRESH_ANALYSIS
        assert mock_client.messages.create.await_count == 2
        manager.dispose()

    @pytest.mark.asyncio
    async def test_provider_failure_is_not_cached(
        self, provider, mock_client, flow_config
    ):
        """Test provider errors surface and the next call retries upstream."""
        mock_client.messages.create.return_value.content[0].text = "not json"
        manager = IntelligentCacheManager.create(app_config=flow_config)
        request = make_request()

        with pytest.raises(ResponseParseError):
            await manager.get_analysis(request, provider.fresh_callback(request))

        assert manager.store.size == 0
        assert manager.get_daily_cost_report().total_requests == 0
        manager.dispose()
