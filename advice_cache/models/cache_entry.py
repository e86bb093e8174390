"""
Cache entry models.

Sandi Metz Principles:
- Single Responsibility: Cache data structure
- Clear naming: Descriptive fields
- Immutable data: All fields are read-only after creation
"""

from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from advice_cache.models.analysis import AnalysisRequest, AnalysisResponse


class CacheSource(str, Enum):
    """Tier that produced an analysis."""

    MEMORY_CACHE = "memory_cache"
    ADAPTED_CACHE = "adapted_cache"
    FRESH_ANALYSIS = "fresh_analysis"


class CachedAnalysis(BaseModel):
    """Analysis stored under a context key."""

    model_config = ConfigDict(frozen=True)

    analysis: AnalysisResponse = Field(..., description="Cached analysis")
    original_request: AnalysisRequest = Field(..., description="Producing request")
    cache_key: str = Field(..., description="Context key")
    created_at: datetime = Field(..., description="Insertion time")
    expires_at: datetime = Field(..., description="Eviction time")

    @classmethod
    def create(
        cls,
        analysis: AnalysisResponse,
        original_request: AnalysisRequest,
        cache_key: str,
        ttl_seconds: float,
        now: datetime,
    ) -> "CachedAnalysis":
        """
        Build an entry whose expiry is fixed at insertion.

        Args:
            analysis: Fresh analysis
            original_request: Request that produced it
            cache_key: Context key
            ttl_seconds: Time to live
            now: Insertion time

        Returns:
            New cache entry
        """
        return cls(
            analysis=analysis,
            original_request=original_request,
            cache_key=cache_key,
            created_at=now,
            expires_at=now + timedelta(seconds=ttl_seconds),
        )

    def age_seconds(self, now: datetime) -> float:
        """Calculate entry age in seconds."""
        return (now - self.created_at).total_seconds()

    def is_expired(self, now: datetime) -> bool:
        """Check whether the entry has outlived its TTL."""
        return now >= self.expires_at


class CacheResult(BaseModel):
    """Result of a cache lookup."""

    analysis: AnalysisResponse
    source: CacheSource
    cost: float = Field(default=0.0, ge=0.0)

    @property
    def from_cache(self) -> bool:
        """Check whether the result avoided an LLM call."""
        return self.source != CacheSource.FRESH_ANALYSIS
