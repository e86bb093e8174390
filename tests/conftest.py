"""
Pytest configuration and fixtures.

Provides common fixtures for testing.
"""

import pytest

from advice_cache.config import AppConfig
from advice_cache.models.analysis import AnalysisRequest
from tests.mocks.factories import FakeClock, make_request


@pytest.fixture
def test_config() -> AppConfig:
    """
    Create test configuration.

    Returns:
        Test configuration instance
    """
    return AppConfig(
        app_env="development",
        anthropic_api_key="test-key",
        coalesce_fresh_computations=True,
        enforce_daily_budget=False,
    )


@pytest.fixture
def clock() -> FakeClock:
    """
    Create a manually advanced clock.

    Returns:
        Fake clock starting at 2024-06-01 08:00
    """
    return FakeClock()


@pytest.fixture
def sample_request() -> AnalysisRequest:
    """
    Create sample analysis request.

    Returns:
        Request with two focus tags
    """
    return make_request()
