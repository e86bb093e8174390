"""
Test data factories.

Builders for requests and a manually advanced clock.
"""

from datetime import datetime, timedelta
from typing import Iterable, Optional

from advice_cache.models.analysis import (
    AnalysisRequest,
    EnvironmentalContext,
    UserContext,
)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 6, 1, 8, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def make_request(
    battery_level: float = 42.0,
    time_of_day: str = "morning",
    tags: Iterable[str] = ("work", "sleep"),
    humidity: float = 55.0,
    pressure_trend: float = 1.2,
) -> AnalysisRequest:
    """
    Build an analysis request with sensible defaults.

    Returns:
        Analysis request
    """
    return AnalysisRequest(
        battery_level=battery_level,
        user_context=UserContext(time_of_day=time_of_day, active_tags=list(tags)),
        environmental_context=EnvironmentalContext(
            humidity=humidity, pressure_trend=pressure_trend
        ),
    )
