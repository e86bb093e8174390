"""
Context similarity calculation and interpretation.

Sandi Metz Principles:
- Single Responsibility: Score calculation
- Small methods: Each calculation isolated
- Clear naming: Descriptive method names
"""

from enum import Enum
from typing import FrozenSet

from advice_cache.models.analysis import AnalysisRequest


class SimilarityLevel(str, Enum):
    """
    Context similarity quality levels.

    Helps interpret similarity scores.
    """

    EXACT = "exact"  # 0.95 - 1.0
    VERY_HIGH = "very_high"  # 0.85 - 0.95
    HIGH = "high"  # 0.75 - 0.85
    MODERATE = "moderate"  # 0.60 - 0.75
    LOW = "low"  # 0.40 - 0.60
    VERY_LOW = "very_low"  # < 0.40


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


class ContextSimilarityCalculator:
    """
    Calculator for analysis request similarity.

    Provides the weighted ranking score and the cheaper difference score
    used for near-duplicate detection.
    """

    # Weights sum to 1.0
    ENERGY_WEIGHT = 0.4
    TIME_WEIGHT = 0.2
    TAG_WEIGHT = 0.3
    ENVIRONMENT_WEIGHT = 0.1

    # Scale of each reading in the difference score
    ENERGY_RANGE = 100.0
    HUMIDITY_RANGE = 100.0
    PRESSURE_RANGE = 20.0

    # Threshold definitions
    EXACT_THRESHOLD = 0.95
    VERY_HIGH_THRESHOLD = 0.85
    HIGH_THRESHOLD = 0.75
    MODERATE_THRESHOLD = 0.60
    LOW_THRESHOLD = 0.40

    @staticmethod
    def energy_similarity(a: AnalysisRequest, b: AnalysisRequest) -> float:
        """Similarity of energy levels (0.0 to 1.0)."""
        return _clamp(1.0 - abs(a.battery_level - b.battery_level) / 100.0)

    @staticmethod
    def time_match(a: AnalysisRequest, b: AnalysisRequest) -> float:
        """1.0 if both requests share a time bucket, else 0.0."""
        return 1.0 if a.user_context.time_of_day == b.user_context.time_of_day else 0.0

    @staticmethod
    def tag_overlap(tags_a: FrozenSet[str], tags_b: FrozenSet[str]) -> float:
        """
        Jaccard index of two tag sets.

        Args:
            tags_a: First tag set
            tags_b: Second tag set

        Returns:
            |A & B| / |A | B|, or 0.0 when both sets are empty
        """
        union = tags_a | tags_b
        if not union:
            return 0.0
        return len(tags_a & tags_b) / len(union)

    @staticmethod
    def environment_similarity(a: AnalysisRequest, b: AnalysisRequest) -> float:
        """Similarity of humidity readings (0.0 to 1.0)."""
        diff = abs(a.environmental_context.humidity - b.environmental_context.humidity)
        return _clamp(1.0 - diff / 100.0)

    @classmethod
    def calculate(cls, a: AnalysisRequest, b: AnalysisRequest) -> float:
        """
        Calculate weighted similarity between two requests.

        Args:
            a: First request
            b: Second request

        Returns:
            Similarity score (0.0 to 1.0)
        """
        weighted = [
            (cls.energy_similarity(a, b), cls.ENERGY_WEIGHT),
            (cls.time_match(a, b), cls.TIME_WEIGHT),
            (
                cls.tag_overlap(a.user_context.active_tags, b.user_context.active_tags),
                cls.TAG_WEIGHT,
            ),
            (cls.environment_similarity(a, b), cls.ENVIRONMENT_WEIGHT),
        ]

        score = sum(value * weight for value, weight in weighted)
        factors = sum(weight for _, weight in weighted)

        return _clamp(score / factors)

    @classmethod
    def context_difference_score(cls, a: AnalysisRequest, b: AnalysisRequest) -> float:
        """
        Calculate near-duplicate score from averaged reading differences.

        Args:
            a: First request
            b: Second request

        Returns:
            1 - mean(energy, humidity, pressure differences), clamped to [0, 1]
        """
        env_a, env_b = a.environmental_context, b.environmental_context
        differences = (
            abs(a.battery_level - b.battery_level) / cls.ENERGY_RANGE,
            abs(env_a.humidity - env_b.humidity) / cls.HUMIDITY_RANGE,
            abs(env_a.pressure_trend - env_b.pressure_trend) / cls.PRESSURE_RANGE,
        )
        return _clamp(1.0 - sum(differences) / len(differences))

    @classmethod
    def is_context_similar(
        cls,
        a: AnalysisRequest,
        b: AnalysisRequest,
        threshold: float = EXACT_THRESHOLD,
    ) -> bool:
        """
        Check if two requests are near-duplicates.

        Args:
            a: Cached request
            b: Incoming request
            threshold: Minimum difference score

        Returns:
            True if score meets threshold
        """
        return cls.context_difference_score(a, b) >= threshold

    @classmethod
    def interpret_score(cls, score: float) -> SimilarityLevel:
        """
        Interpret similarity score quality.

        Args:
            score: Similarity score (0.0 to 1.0)

        Returns:
            SimilarityLevel enum
        """
        if score >= cls.EXACT_THRESHOLD:
            return SimilarityLevel.EXACT
        elif score >= cls.VERY_HIGH_THRESHOLD:
            return SimilarityLevel.VERY_HIGH
        elif score >= cls.HIGH_THRESHOLD:
            return SimilarityLevel.HIGH
        elif score >= cls.MODERATE_THRESHOLD:
            return SimilarityLevel.MODERATE
        elif score >= cls.LOW_THRESHOLD:
            return SimilarityLevel.LOW
        else:
            return SimilarityLevel.VERY_LOW


# Standalone functions for convenience
def context_similarity(a: AnalysisRequest, b: AnalysisRequest) -> float:
    """Calculate weighted similarity between requests."""
    return ContextSimilarityCalculator.calculate(a, b)


def is_context_similar(
    a: AnalysisRequest, b: AnalysisRequest, threshold: float = 0.95
) -> bool:
    """Check if two requests are near-duplicates."""
    return ContextSimilarityCalculator.is_context_similar(a, b, threshold)
