"""
Services module.

Contains the cache orchestration service.
"""

from advice_cache.services.cache_manager import (
    CacheStatistics,
    IntelligentCacheManager,
)

__all__ = ["CacheStatistics", "IntelligentCacheManager"]
