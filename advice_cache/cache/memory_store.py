"""
In-memory analysis cache with per-key TTL eviction.

Sandi Metz Principles:
- Single Responsibility: Store and expire cached analyses
- Small methods: Each method < 10 lines
- Dependency Injection: Clock injected
"""

import asyncio
from datetime import datetime
from typing import Callable, Dict, List, Optional

from advice_cache.exceptions import CacheError
from advice_cache.models.cache_entry import CachedAnalysis
from advice_cache.utils.logger import get_logger

logger = get_logger(__name__)


class MemoryCacheStore:
    """
    Key to entry mapping with scheduled eviction.

    Each key owns at most one eviction timer on the running event loop.
    Overwriting a key cancels its old timer before installing a new one.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize store.

        Args:
            clock: Returns the current time (defaults to datetime.now)
        """
        self._clock = clock or datetime.now
        self._entries: Dict[str, CachedAnalysis] = {}
        self._timers: Dict[str, asyncio.TimerHandle] = {}

    def get(self, key: str) -> Optional[CachedAnalysis]:
        """
        Get live entry for key.

        Args:
            key: Context key

        Returns:
            Cached analysis or None if absent or expired
        """
        entry = self._entries.get(key)
        if entry is None or entry.is_expired(self._clock()):
            return None
        return entry

    def put(self, key: str, entry: CachedAnalysis, ttl_seconds: float) -> None:
        """
        Insert or overwrite entry and schedule its eviction.

        Must be called from a running event loop.

        Args:
            key: Context key
            entry: Entry to store
            ttl_seconds: Seconds until eviction

        Raises:
            CacheError: If TTL is not positive or no loop is running
        """
        if ttl_seconds <= 0:
            raise CacheError(f"TTL must be positive, got {ttl_seconds}")

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise CacheError("Cache writes require a running event loop") from e

        self._cancel_timer(key)
        self._entries[key] = entry
        self._timers[key] = loop.call_later(ttl_seconds, self._evict, key, entry)

        logger.debug("Cached analysis", cache_key=key, ttl=ttl_seconds)

    def delete(self, key: str) -> bool:
        """
        Remove entry and its timer.

        Args:
            key: Context key

        Returns:
            True if an entry was removed
        """
        self._cancel_timer(key)
        return self._entries.pop(key, None) is not None

    def all_entries(self) -> List[CachedAnalysis]:
        """
        Get all live entries.

        Returns:
            Unexpired entries in no particular order
        """
        now = self._clock()
        return [e for e in self._entries.values() if not e.is_expired(now)]

    def clear(self) -> None:
        """Cancel all pending evictions and remove all entries."""
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._entries.clear()
        logger.debug("Memory cache cleared")

    @property
    def size(self) -> int:
        """Number of stored entries, expired or not."""
        return len(self._entries)

    @property
    def pending_evictions(self) -> int:
        """Number of scheduled eviction timers."""
        return len(self._timers)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def _evict(self, key: str, entry: CachedAnalysis) -> None:
        """Timer callback: remove entry if it is still the one scheduled."""
        if self._entries.get(key) is not entry:
            return
        del self._entries[key]
        self._timers.pop(key, None)
        logger.debug("Evicted expired analysis", cache_key=key)

    def _cancel_timer(self, key: str) -> None:
        timer = self._timers.pop(key, None)
        if timer is not None:
            timer.cancel()
