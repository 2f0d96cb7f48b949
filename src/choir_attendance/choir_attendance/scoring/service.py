from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Optional

from ..core.enums import AnomalyKind
from ..snapshots.model import Snapshot
from .calculator.base import ScoreCalculator
from .calculator.standard_calculator import StandardScoreCalculator
from .cohort import CohortAggregator
from .model import CohortResult, RecordAnomaly, ScoreResult, ScoreWindow
from .policy import ScoringPolicy

LOGGER = logging.getLogger(__name__)


class ScoringService:
    """Use case: member and cohort statistics over a snapshot.

    Results are memoized per (snapshot, window); the memo is dropped as soon
    as another snapshot comes in. Snapshots are compared by identity as well
    as version, so two snapshots that share a version never share results.
    """

    def __init__(
        self,
        policy: Optional[ScoringPolicy] = None,
        *,
        calculator: Optional[ScoreCalculator] = None,
        memoize: bool = True,
    ):
        self._policy = policy or ScoringPolicy()
        self._calculator = calculator or StandardScoreCalculator(self._policy)
        self._cohort = CohortAggregator(self._calculator, policy=self._policy)
        self._memoize = memoize
        self._memo_snapshot: Optional[Snapshot] = None
        self._memo: dict[tuple, object] = {}
        self._memo_lock = threading.Lock()

    @property
    def policy(self) -> ScoringPolicy:
        return self._policy

    def _cached(self, snapshot: Snapshot, key: tuple, compute):
        if not self._memoize:
            return compute()
        with self._memo_lock:
            if not self._same_snapshot(snapshot):
                self._memo.clear()
                self._memo_snapshot = snapshot
            if key in self._memo:
                return self._memo[key]

        value = compute()
        with self._memo_lock:
            # Another snapshot may have replaced the memo while computing.
            if not self._same_snapshot(snapshot):
                return value
            return self._memo.setdefault(key, value)

    def _same_snapshot(self, snapshot: Snapshot) -> bool:
        return self._memo_snapshot is snapshot

    def compute_member_score(self, snapshot: Snapshot, member_id: str, window: ScoreWindow) -> ScoreResult:
        assert snapshot is not None, "snapshot is required"

        if snapshot.member(member_id) is None:
            anomaly = RecordAnomaly(AnomalyKind.MISSING_REFERENCE, None, member_id, "member not in member list")
            LOGGER.warning("score requested for unknown member %s", member_id)
            return ScoreResult(
                member_id=member_id,
                window=window,
                excuse_allowance=self._policy.excuse_allowance(monthly=window.is_monthly),
                anomalies=(anomaly,),
            )

        return self._cached(
            snapshot,
            ("member", member_id, window),
            lambda: self._calculator.score_member(member_id=member_id, window=window, events=snapshot.events),
        )

    def compute_cohort_stats(self, snapshot: Snapshot, window: ScoreWindow) -> CohortResult:
        assert snapshot is not None, "snapshot is required"
        return self._cached(
            snapshot,
            ("cohort", window),
            lambda: self._cohort.aggregate(members=snapshot.members, events=snapshot.events, window=window),
        )

    @staticmethod
    def available_years(snapshot: Snapshot, *, today: Optional[date] = None) -> list[int]:
        """Years that have events, plus the current one, newest first."""
        years = {e.event_date.year for e in snapshot.events}
        years.add((today or date.today()).year)
        return sorted(years, reverse=True)

    @staticmethod
    def available_months(snapshot: Snapshot, year: int) -> list[int]:
        """Zero-based months of ``year`` that have at least one event."""
        return sorted({e.event_date.month - 1 for e in snapshot.events if e.event_date.year == int(year)})
