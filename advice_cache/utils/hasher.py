"""
Cache key generation utilities.

Sandi Metz Principles:
- Single Responsibility: Key generation
- Small functions: Each does one thing
- Pure functions: No side effects
"""

import math

from advice_cache.models.analysis import AnalysisRequest


def energy_bucket(battery_level: float) -> int:
    """
    Bucket energy level into 10-point ranges.

    Args:
        battery_level: Energy level (0-100)

    Returns:
        Lower bound of the bucket (e.g. 42 -> 40)
    """
    return math.floor(battery_level / 10) * 10


def tag_hash(request: AnalysisRequest) -> str:
    """
    Join focus tags deterministically.

    Args:
        request: Analysis request

    Returns:
        Sorted, comma-joined tags ("" when none)
    """
    return ",".join(request.user_context.sorted_tags)


def environment_hash(request: AnalysisRequest) -> str:
    """
    Bucket environmental readings.

    Args:
        request: Analysis request

    Returns:
        "{humidity // 10}_{floor(pressure_trend)}"
    """
    env = request.environmental_context
    return f"{math.floor(env.humidity / 10)}_{math.floor(env.pressure_trend)}"


def generate_context_key(request: AnalysisRequest) -> str:
    """
    Generate cache key for an analysis request.

    Requests that differ only inside a bucket share a key.

    Args:
        request: Analysis request

    Returns:
        Context key ("{energy}_{timeOfDay}_{tags}_{environment}")
    """
    return "_".join(
        [
            str(energy_bucket(request.battery_level)),
            request.user_context.time_of_day,
            tag_hash(request),
            environment_hash(request),
        ]
    )
