"""
Daily per-user LLM cost tracking.

Sandi Metz Principles:
- Single Responsibility: Track and report LLM costs
- Small methods: Each method < 10 lines
- Clear naming: Self-documenting code
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Dict, List, Optional

from advice_cache.utils.logger import get_logger, log_budget_exceeded

logger = get_logger(__name__)


@dataclass
class DailyCostTracker:
    """Spend of one user on one calendar day."""

    user_id: str
    date: str
    total_cost: float
    request_count: int
    last_update: datetime


@dataclass
class CostReport:
    """Aggregate of today's trackers."""

    date: str
    total_cost: float
    average_cost_per_user: float
    total_requests: int
    active_users: int
    budget_utilization: float


class DailyCostLedger:
    """
    Track analysis costs per user per day.

    Trackers are keyed by "{user_id}_{YYYY-MM-DD}" using the local calendar
    date. When the first tracker of a new day is created, trackers older than
    the retention window are pruned.
    """

    def __init__(
        self,
        daily_budget: float = 0.10,
        clock: Optional[Callable[[], datetime]] = None,
        retention_days: int = 7,
    ):
        """
        Initialize ledger.

        Args:
            daily_budget: Per-user budget in USD per day
            clock: Returns the current local time (defaults to datetime.now)
            retention_days: Days of trackers kept, today included
        """
        self._daily_budget = daily_budget
        self._clock = clock or datetime.now
        self._retention_days = retention_days
        self._trackers: Dict[str, DailyCostTracker] = {}
        self._last_day: Optional[date] = None

    @property
    def daily_budget(self) -> float:
        """Per-user daily budget in USD."""
        return self._daily_budget

    def track_cost(self, user_id: str, cost: float) -> DailyCostTracker:
        """
        Record spend for a user today.

        Args:
            user_id: User identifier
            cost: Cost in USD

        Returns:
            Updated tracker

        Raises:
            ValueError: If cost is negative
        """
        if cost < 0:
            raise ValueError(f"Cost must be non-negative, got {cost}")

        now = self._clock()
        tracker = self._get_or_create(user_id, now)
        tracker.total_cost += cost
        tracker.request_count += 1
        tracker.last_update = now

        logger.info(
            "Tracked analysis cost",
            user_id=user_id,
            cost=cost,
            daily_total=tracker.total_cost,
        )

        if tracker.total_cost > self._daily_budget:
            log_budget_exceeded(user_id, tracker.total_cost, self._daily_budget)

        return tracker

    def get_tracker(
        self, user_id: str, day: Optional[date] = None
    ) -> Optional[DailyCostTracker]:
        """
        Get tracker for a user.

        Args:
            user_id: User identifier
            day: Calendar day (today if None)

        Returns:
            Tracker or None if the user has no spend that day
        """
        day = day or self._clock().date()
        return self._trackers.get(self._key(user_id, day))

    def is_over_budget(self, user_id: str) -> bool:
        """
        Check whether a user has exceeded today's budget.

        Args:
            user_id: User identifier

        Returns:
            True if today's spend is above the budget
        """
        tracker = self.get_tracker(user_id)
        return tracker is not None and tracker.total_cost > self._daily_budget

    def daily_cost_report(self) -> CostReport:
        """
        Summarize today's spend across users.

        Returns:
            Cost report (zeros when nobody has spent today)
        """
        today = self._clock().date().isoformat()
        trackers = [t for t in self._trackers.values() if t.date == today]

        total_cost = sum(t.total_cost for t in trackers)
        total_requests = sum(t.request_count for t in trackers)
        active_users = len(trackers)

        return CostReport(
            date=today,
            total_cost=total_cost,
            average_cost_per_user=total_cost / active_users if active_users else 0.0,
            total_requests=total_requests,
            active_users=active_users,
            budget_utilization=(
                total_cost / (active_users * self._daily_budget)
                if active_users
                else 0.0
            ),
        )

    def prune(self, before: date) -> int:
        """
        Drop trackers dated before a day.

        Args:
            before: First day to keep

        Returns:
            Number of trackers removed
        """
        cutoff = before.isoformat()
        stale = [k for k, t in self._trackers.items() if t.date < cutoff]
        for key in stale:
            del self._trackers[key]

        if stale:
            logger.info("Pruned cost trackers", removed=len(stale), before=cutoff)
        return len(stale)

    def get_all_trackers(self) -> List[DailyCostTracker]:
        """
        Get all trackers.

        Returns:
            List of all trackers, any day
        """
        return list(self._trackers.values())

    def reset(self) -> None:
        """Clear all trackers."""
        self._trackers.clear()
        self._last_day = None
        logger.info("Cost ledger reset")

    def _get_or_create(self, user_id: str, now: datetime) -> DailyCostTracker:
        today = now.date()
        if self._last_day != today:
            self._last_day = today
            self.prune(today - timedelta(days=self._retention_days - 1))

        key = self._key(user_id, today)
        tracker = self._trackers.get(key)
        if tracker is None:
            tracker = DailyCostTracker(
                user_id=user_id,
                date=today.isoformat(),
                total_cost=0.0,
                request_count=0,
                last_update=now,
            )
            self._trackers[key] = tracker
        return tracker

    @staticmethod
    def _key(user_id: str, day: date) -> str:
        return f"{user_id}_{day.isoformat()}"
