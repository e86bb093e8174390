"""
Request pipeline module.

Contains in-flight deduplication of fresh computations.
"""

from advice_cache.pipeline.deduplication import (
    DeduplicationStats,
    FreshComputationCoalescer,
)

__all__ = ["DeduplicationStats", "FreshComputationCoalescer"]
