from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Optional, Sequence

from ...attendance.model import AttendanceEvent
from ...core.enums import AnomalyKind, AttendanceMark, Category
from ..excuse_tracker import ExcuseAllowanceTracker
from ..model import CategoryScore, RecordAnomaly, ScoredEvent, ScoreResult, ScoreWindow
from ..policy import ScoringPolicy
from .base import ScoreCalculator

LOGGER = logging.getLogger(__name__)


class StandardScoreCalculator(ScoreCalculator):
    """Standard rule: sum(points x multiplier(effective status)) / sum(points).

    Only point-bearing events inside the window where the member was marked
    are scored; an unmarked member is left out of both sums for that event.
    """

    def __init__(self, policy: Optional[ScoringPolicy] = None):
        self._policy = policy or ScoringPolicy()

    @property
    def policy(self) -> ScoringPolicy:
        return self._policy

    def score_member(
        self,
        *,
        member_id: str,
        window: ScoreWindow,
        events: Sequence[AttendanceEvent],
    ) -> ScoreResult:
        assert events is not None, "events must be a sequence (use () for an empty snapshot)"
        policy = self._policy

        in_window = [e for e in events or () if window.contains(e.event_date) and policy.is_scored(e.category)]
        # sorted() is stable, so same-day events keep their stored order.
        in_window = sorted(in_window, key=lambda e: e.event_date)

        tracker = ExcuseAllowanceTracker(policy.monthly_excuse_cap)
        earned = 0.0
        possible = 0.0
        excused = 0
        excused_present = 0
        tallies: dict[Category, dict] = {}
        lines: list[ScoredEvent] = []
        anomalies: list[RecordAnomaly] = []

        for event in in_window:
            record = event.record_for(member_id)
            if record is None:
                continue

            mark = record.mark
            if mark is None:
                anomalies.append(
                    RecordAnomaly(AnomalyKind.UNKNOWN_STATUS, event.event_id, member_id, f"status={record.status!r}")
                )
            elif mark.needs_reason and not (record.reason or "").strip():
                anomalies.append(RecordAnomaly(AnomalyKind.MISSING_REASON, event.event_id, member_id, mark.value))

            if mark == AttendanceMark.EXCUSED:
                excused += 1
            elif mark == AttendanceMark.EXCUSED_BUT_PRESENT:
                excused_present += 1

            effective = tracker.effective_status(event.event_date, record.status)
            points = policy.point_value(event.category)
            multiplier = policy.multiplier(effective)
            awarded = points * multiplier

            earned += awarded
            possible += points

            category = event.kind
            t = tallies.get(category)
            if not t:
                t = {"earned": 0.0, "possible": 0.0, "count": 0}
                tallies[category] = t
            t["earned"] += awarded
            t["possible"] += points
            t["count"] += 1

            lines.append(
                ScoredEvent(
                    event_id=event.event_id,
                    event_date=event.event_date,
                    category=category,
                    status=record.status,
                    effective_status=effective,
                    multiplier=multiplier,
                    points_earned=awarded,
                    points_possible=points,
                )
            )

        for a in anomalies:
            LOGGER.warning("attendance anomaly %s event=%s member=%s %s", a.kind.value, a.event_id, a.member_id, a.detail)

        percentage = min(100.0, max(0.0, earned / possible * 100)) if possible > 0 else 0.0

        return ScoreResult(
            member_id=member_id,
            window=window,
            points_earned=earned,
            points_possible=possible,
            percentage=percentage,
            per_category=MappingProxyType(
                {
                    c: CategoryScore(category=c, points_earned=t["earned"], points_possible=t["possible"], count=t["count"])
                    for c, t in tallies.items()
                }
            ),
            excused_count=excused,
            excused_but_present_count=excused_present,
            excuse_allowance=policy.excuse_allowance(monthly=window.is_monthly),
            events=tuple(lines),
            anomalies=tuple(anomalies),
        )
