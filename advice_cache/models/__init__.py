"""
Models package for Advice Cache.

Exports all model classes for easy imports throughout the application.
"""

# Analysis models
from advice_cache.models.analysis import (
    AnalysisRequest,
    AnalysisResponse,
    BatteryTrend,
    DataQuality,
    EnvironmentalContext,
    FocusTag,
    TimeOfDay,
    UserContext,
)

# Cache models
from advice_cache.models.cache_entry import CachedAnalysis, CacheResult, CacheSource

__all__ = [
    # Analysis
    "AnalysisRequest",
    "AnalysisResponse",
    "BatteryTrend",
    "DataQuality",
    "EnvironmentalContext",
    "FocusTag",
    "TimeOfDay",
    "UserContext",
    # Cache
    "CachedAnalysis",
    "CacheResult",
    "CacheSource",
]
