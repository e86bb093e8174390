"""
Fresh computation deduplication.

Concurrent cache misses for the same context key share one computation.

Sandi Metz Principles:
- Single Responsibility: In-flight deduplication
- Async-safe: No await between lookup and registration
- Memory-bounded: Entries removed as soon as they settle
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Tuple

from advice_cache.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class DeduplicationStats:
    """Statistics for deduplication."""

    total_calls: int = 0
    deduplicated: int = 0
    unique: int = 0

    @property
    def dedup_rate(self) -> float:
        """Get deduplication rate."""
        if self.total_calls == 0:
            return 0.0
        return self.deduplicated / self.total_calls


class FreshComputationCoalescer:
    """
    Deduplicates concurrent computations for the same key.

    The first caller runs the computation; callers arriving while it is
    in flight await the same future. Results are never retained once the
    computation settles.
    """

    def __init__(self) -> None:
        self._pending: Dict[str, asyncio.Future] = {}
        self._stats = DeduplicationStats()

    async def run(
        self, key: str, compute: Callable[[], Awaitable[Any]]
    ) -> Tuple[bool, Any]:
        """
        Run compute for key, or join the in-flight run.

        Args:
            key: Deduplication key
            compute: Zero-argument coroutine function

        Returns:
            Tuple of (is_duplicate, result)

        Raises:
            Exception: Whatever compute raised, for every waiter
        """
        self._stats.total_calls += 1

        pending = self._pending.get(key)
        if pending is not None:
            self._stats.deduplicated += 1
            logger.debug("Joined in-flight computation", cache_key=key)
            return True, await asyncio.shield(pending)

        self._stats.unique += 1
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        future.add_done_callback(_consume_exception)
        self._pending[key] = future

        try:
            result = await compute()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as e:
            future.set_exception(e)
            raise
        else:
            future.set_result(result)
            return False, result
        finally:
            del self._pending[key]

    def is_pending(self, key: str) -> bool:
        """Check whether a computation is in flight for key."""
        return key in self._pending

    @property
    def pending_count(self) -> int:
        """Get number of in-flight computations."""
        return len(self._pending)

    @property
    def stats(self) -> DeduplicationStats:
        """Get deduplication statistics."""
        return self._stats

    def reset_stats(self) -> None:
        """Reset statistics."""
        self._stats = DeduplicationStats()


def _consume_exception(future: asyncio.Future) -> None:
    # Waiters re-raise it; mark retrieved so a lone failure is not reported twice
    if not future.cancelled():
        future.exception()
