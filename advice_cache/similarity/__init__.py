"""
Context similarity utilities.

This module provides request similarity scoring and score interpretation.
"""

from advice_cache.similarity.score_calculator import (
    ContextSimilarityCalculator,
    SimilarityLevel,
    context_similarity,
    is_context_similar,
)

__all__ = [
    "ContextSimilarityCalculator",
    "SimilarityLevel",
    "context_similarity",
    "is_context_similar",
]
