"""
Intelligent analysis cache manager.

Orchestrates the recent-context tier, the similarity-adapted tier and fresh
LLM analyses, and records the spend of every fresh analysis.

Sandi Metz Principles:
- Single Responsibility: Cache tier orchestration
- Small methods: Each tier isolated
- Dependency Injection: Store, ledger, estimator and clock injected
"""

import inspect
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Optional, Tuple, Union

from advice_cache.cache.memory_store import MemoryCacheStore
from advice_cache.config import AppConfig, config
from advice_cache.exceptions import BudgetExceededError, CacheError
from advice_cache.llm.cost_calculator import CostEstimator
from advice_cache.llm.cost_tracker import CostReport, DailyCostLedger, DailyCostTracker
from advice_cache.models.analysis import AnalysisRequest, AnalysisResponse
from advice_cache.models.cache_entry import CachedAnalysis, CacheResult, CacheSource
from advice_cache.pipeline.deduplication import FreshComputationCoalescer
from advice_cache.similarity.score_calculator import ContextSimilarityCalculator
from advice_cache.utils.hasher import generate_context_key
from advice_cache.utils.logger import (
    get_logger,
    log_cache_hit,
    log_cache_miss,
    log_error,
    setup_logging,
)

logger = get_logger(__name__)

ComputeFresh = Callable[[], Union[Awaitable[AnalysisResponse], AnalysisResponse]]


@dataclass
class CacheStatistics:
    """Counters per cache tier."""

    memory_hits: int = 0
    adapted_hits: int = 0
    fresh_computations: int = 0
    coalesced: int = 0

    @property
    def total_requests(self) -> int:
        """Get number of answered requests."""
        return (
            self.memory_hits
            + self.adapted_hits
            + self.fresh_computations
            + self.coalesced
        )

    @property
    def hit_rate(self) -> float:
        """Share of requests answered without a new LLM call."""
        if self.total_requests == 0:
            return 0.0
        return (self.total_requests - self.fresh_computations) / self.total_requests


class IntelligentCacheManager:
    """
    Context-aware analysis cache.

    Lookup order: recent context -> similar context -> fresh analysis.
    Errors raised by the fresh computation reach the caller untouched and
    nothing is cached for them.
    """

    def __init__(
        self,
        app_config: Optional[AppConfig] = None,
        store: Optional[MemoryCacheStore] = None,
        ledger: Optional[DailyCostLedger] = None,
        estimator: Optional[CostEstimator] = None,
        coalescer: Optional[FreshComputationCoalescer] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize manager.

        Args:
            app_config: Configuration (uses global config if None)
            store: Entry store (creates default if None)
            ledger: Cost ledger (creates default if None)
            estimator: Cost estimator (creates default if None)
            coalescer: In-flight deduplication (default depends on config)
            clock: Returns the current time (defaults to datetime.now)
        """
        self._config = app_config or config
        self._clock = clock or datetime.now
        self._store = store or MemoryCacheStore(clock=self._clock)
        self._ledger = ledger or DailyCostLedger(
            daily_budget=self._config.daily_budget,
            clock=self._clock,
            retention_days=self._config.cost_retention_days,
        )
        self._estimator = estimator or CostEstimator(self._config)
        if coalescer is None and self._config.coalesce_fresh_computations:
            coalescer = FreshComputationCoalescer()
        self._coalescer = coalescer
        self._similarity = ContextSimilarityCalculator
        self._stats = CacheStatistics()
        self._disposed = False

    @classmethod
    def create(cls, **kwargs) -> "IntelligentCacheManager":
        """
        Build a manager owned by the caller and configure logging.

        Args:
            **kwargs: Constructor arguments

        Returns:
            New manager; release it with dispose()
        """
        manager = cls(**kwargs)
        setup_logging(
            manager._config.log_level, json_output=manager._config.is_production
        )
        logger.info("Cache manager created", app=manager._config.app_name)
        return manager

    def dispose(self) -> None:
        """
        Cancel pending evictions and drop all cached and cost state.

        Computations still in flight complete for their callers but are
        neither cached nor charged.
        """
        self._store.clear()
        self._ledger.reset()
        self._disposed = True
        logger.info("Cache manager disposed")

    async def __aenter__(self) -> "IntelligentCacheManager":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    async def get_analysis(
        self,
        request: AnalysisRequest,
        compute_fresh: ComputeFresh,
        user_id: Optional[str] = None,
    ) -> CacheResult:
        """
        Get analysis from cache or compute a fresh one.

        Args:
            request: Analysis request
            compute_fresh: Zero-argument callable producing a fresh analysis
            user_id: Cost owner (defaults to configured user)

        Returns:
            Analysis with its source tier and incurred cost

        Raises:
            CacheError: If the manager has been disposed
            BudgetExceededError: If budget enforcement refuses a fresh analysis
        """
        if self._disposed:
            raise CacheError("Cache manager has been disposed")

        cache_key = generate_context_key(request)

        result = self._check_recent(cache_key, request)
        if result is None:
            result = self._check_similar(cache_key, request)
        if result is not None:
            return result

        log_cache_miss(cache_key)
        owner = user_id or self._config.default_user_id

        if self._coalescer is None:
            return await self._compute_fresh(cache_key, request, compute_fresh, owner)

        is_duplicate, result = await self._coalescer.run(
            cache_key,
            lambda: self._compute_fresh(cache_key, request, compute_fresh, owner),
        )
        if is_duplicate:
            self._stats.coalesced += 1
            return CacheResult(
                analysis=result.analysis.model_copy(deep=True),
                source=CacheSource.FRESH_ANALYSIS,
                cost=0.0,
            )
        return result

    def track_cost(self, user_id: str, cost: float) -> DailyCostTracker:
        """
        Record spend for a user.

        Args:
            user_id: User identifier
            cost: Cost in USD

        Returns:
            Updated daily tracker
        """
        return self._ledger.track_cost(user_id, cost)

    def get_daily_cost_report(self) -> CostReport:
        """
        Summarize today's spend.

        Returns:
            Daily cost report
        """
        return self._ledger.daily_cost_report()

    @property
    def stats(self) -> CacheStatistics:
        """Get tier statistics."""
        return self._stats

    @property
    def store(self) -> MemoryCacheStore:
        """Get entry store."""
        return self._store

    @property
    def ledger(self) -> DailyCostLedger:
        """Get cost ledger."""
        return self._ledger

    def _check_recent(
        self, cache_key: str, request: AnalysisRequest
    ) -> Optional[CacheResult]:
        """
        Serve a near-duplicate request from its own bucket.

        Args:
            cache_key: Context key
            request: Analysis request

        Returns:
            Result with refreshed timestamps, or None
        """
        entry = self._store.get(cache_key)
        if entry is None or not self._similarity.is_context_similar(
            entry.original_request, request, self._config.exact_match_threshold
        ):
            return None

        self._stats.memory_hits += 1
        log_cache_hit(cache_key, CacheSource.MEMORY_CACHE.value)
        return CacheResult(
            analysis=entry.analysis.with_refreshed_timestamp(self._clock()),
            source=CacheSource.MEMORY_CACHE,
            cost=0.0,
        )

    def _check_similar(
        self, cache_key: str, request: AnalysisRequest
    ) -> Optional[CacheResult]:
        """
        Adapt the most similar cached analysis.

        Args:
            cache_key: Context key
            request: Analysis request

        Returns:
            Adapted result, or None
        """
        entry, score = self._find_similar(request)
        if entry is None or not self._can_adapt(entry, score):
            return None

        self._stats.adapted_hits += 1
        log_cache_hit(
            cache_key,
            CacheSource.ADAPTED_CACHE.value,
            matched_key=entry.cache_key,
            similarity=round(score, 4),
            level=self._similarity.interpret_score(score).value,
        )
        return CacheResult(
            analysis=entry.analysis.with_refreshed_timestamp(
                self._clock(), include_data_quality=False
            ),
            source=CacheSource.ADAPTED_CACHE,
            cost=0.0,
        )

    def _find_similar(
        self, request: AnalysisRequest
    ) -> Tuple[Optional[CachedAnalysis], float]:
        """
        Find the best-scoring entry above the similarity threshold.

        Args:
            request: Analysis request

        Returns:
            Tuple of (entry or None, its score)
        """
        best: Optional[CachedAnalysis] = None
        best_score = 0.0

        for entry in self._store.all_entries():
            score = self._similarity.calculate(entry.original_request, request)
            if score > best_score and score > self._config.similarity_threshold:
                best, best_score = entry, score

        return best, best_score

    def _can_adapt(self, entry: CachedAnalysis, score: float) -> bool:
        """Check entry age and similarity allow adaptation."""
        age = entry.age_seconds(self._clock())
        return (
            age < self._config.adapt_max_age_seconds
            and score > self._config.adapt_similarity_threshold
        )

    async def _compute_fresh(
        self,
        cache_key: str,
        request: AnalysisRequest,
        compute_fresh: ComputeFresh,
        user_id: str,
    ) -> CacheResult:
        """
        Run the fresh computation, record its cost and cache it.

        Args:
            cache_key: Context key
            request: Analysis request
            compute_fresh: Fresh computation
            user_id: Cost owner

        Returns:
            Fresh result with estimated cost
        """
        self._enforce_budget(user_id)

        try:
            analysis = compute_fresh()
            if inspect.isawaitable(analysis):
                analysis = await analysis
        except Exception as e:
            log_error(e, "fresh_analysis", cache_key=cache_key, user_id=user_id)
            raise

        cost = self._estimator.estimate(request)
        if self._disposed:
            logger.info("Analysis finished after dispose", cache_key=cache_key)
            return CacheResult(
                analysis=analysis, source=CacheSource.FRESH_ANALYSIS, cost=cost
            )

        self._ledger.track_cost(user_id, cost)

        ttl = self._config.fresh_ttl_seconds
        entry = CachedAnalysis.create(analysis, request, cache_key, ttl, self._clock())
        self._store.put(cache_key, entry, ttl)

        self._stats.fresh_computations += 1
        logger.info("Fresh analysis cached", cache_key=cache_key, cost=cost)
        return CacheResult(
            analysis=analysis.model_copy(deep=True),
            source=CacheSource.FRESH_ANALYSIS,
            cost=cost,
        )

    def _enforce_budget(self, user_id: str) -> None:
        """
        Refuse fresh analyses for users over budget when enforcement is on.

        Raises:
            BudgetExceededError: If enforcement is on and user is over budget
        """
        if not self._config.enforce_daily_budget:
            return
        if not self._ledger.is_over_budget(user_id):
            return

        tracker = self._ledger.get_tracker(user_id)
        raise BudgetExceededError(
            user_id=user_id,
            total_cost=tracker.total_cost if tracker else 0.0,
            budget=self._ledger.daily_budget,
        )
