from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Optional, Sequence

from ..attendance.model import AttendanceEvent
from ..core.enums import Category, Gender
from ..members.model import Member
from .calculator.base import ScoreCalculator
from .calculator.standard_calculator import StandardScoreCalculator
from .model import CohortResult, MemberStanding, ScoreWindow
from .policy import ScoringPolicy

LOGGER = logging.getLogger(__name__)


def _weighted_percentage(standings: Sequence[MemberStanding]) -> float:
    earned = sum(s.points_earned for s in standings)
    possible = sum(s.points_possible for s in standings)
    return earned / possible * 100 if possible > 0 else 0.0


def _ranking_key(s: MemberStanding):
    return (-s.points_earned, s.name.casefold(), s.member_id)


class CohortAggregator:
    """Runs the member calculator over the whole choir for one window.

    Note the two different averages: the overall one is the plain mean of
    member percentages, the per-gender ones are point-weighted.
    """

    def __init__(self, calculator: Optional[ScoreCalculator] = None, *, policy: Optional[ScoringPolicy] = None):
        self._policy = policy or ScoringPolicy()
        self._calculator = calculator or StandardScoreCalculator(self._policy)

    def aggregate(
        self,
        *,
        members: Sequence[Member],
        events: Sequence[AttendanceEvent],
        window: ScoreWindow,
    ) -> CohortResult:
        assert members is not None and events is not None, "pass empty sequences, not None"
        members = list(members or ())
        events = list(events or ())

        in_window = [e for e in events if window.contains(e.event_date)]
        # Only point-bearing categories are tallied; Daily mass is left out.
        activity_counts = {c: 0 for c in Category if self._policy.point_value(c) > 0}
        for e in in_window:
            c = e.kind
            if c in activity_counts:
                activity_counts[c] += 1

        known_ids = {m.member_id for m in members}
        orphans = {r.member_id for e in in_window for r in e.records if r.member_id not in known_ids}
        if orphans:
            LOGGER.warning("ignoring records of %d member(s) no longer in the member list", len(orphans))

        standings = []
        for m in members:
            score = self._calculator.score_member(member_id=m.member_id, window=window, events=events)
            standings.append(
                MemberStanding(
                    member_id=m.member_id,
                    name=m.name,
                    gender=m.gender,
                    points_earned=score.points_earned,
                    points_possible=score.points_possible,
                    percentage=score.percentage,
                )
            )

        standings.sort(key=_ranking_key)
        policy = self._policy
        limit = policy.ranking_limit

        average = sum(s.percentage for s in standings) / len(standings) if standings else 0.0
        men = [s for s in standings if s.gender == Gender.MALE]
        women = [s for s in standings if s.gender == Gender.FEMALE]

        return CohortResult(
            window=window,
            total_members=len(members),
            total_events=sum(1 for e in in_window if e.records),
            average_percentage=average,
            men_average_percentage=_weighted_percentage(men),
            women_average_percentage=_weighted_percentage(women),
            top_performers=tuple(s for s in standings if s.percentage >= policy.top_performer_threshold)[:limit],
            needs_attention=tuple(s for s in standings if s.percentage < policy.needs_attention_threshold)[:limit],
            standings=tuple(standings),
            activity_counts=MappingProxyType(activity_counts),
        )
