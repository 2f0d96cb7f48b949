from datetime import date

import pytest

from src.choir_attendance.choir_attendance.core.enums import Category, Gender
from src.choir_attendance.choir_attendance.members.model import Member
from src.choir_attendance.choir_attendance.scoring.cohort import CohortAggregator
from src.choir_attendance.choir_attendance.scoring.model import ScoreWindow
from src.choir_attendance.choir_attendance.scoring.policy import ScoringPolicy
from tests.fakes import ev, rec


def _member(member_id, name, gender=Gender.MALE):
    return Member(member_id=member_id, name=name, gender=gender)


def test_overall_average_is_mean_but_gender_average_is_point_weighted():
    members = [_member("a", "A"), _member("b", "B")]
    events = [ev(1, date(2025, 1, 4), "Cleaning", rec("a", "Present"))]
    events += [ev(10 + i, date(2025, 1, 10 + i), "Cleaning", rec("b", "Absent")) for i in range(10)]

    result = CohortAggregator().aggregate(members=members, events=events, window=ScoreWindow(2025))

    assert result.average_percentage == pytest.approx(50.0)
    assert result.men_average_percentage == pytest.approx(10 / 110 * 100)
    assert result.women_average_percentage == 0.0
    assert result.total_members == 2
    assert result.total_events == 11


def test_rankings_use_thresholds_and_break_ties_by_name():
    members = [_member("z", "Zed"), _member("y", "Amy", Gender.FEMALE), _member("x", "Max")]
    events = [
        ev(1, date(2025, 1, 5), "Sunday morning mass", rec("z", "Present"), rec("y", "Present"), rec("x", "Absent")),
    ]
    result = CohortAggregator().aggregate(members=members, events=events, window=ScoreWindow(2025, 0))

    assert [s.name for s in result.top_performers] == ["Amy", "Zed"]
    assert [s.name for s in result.needs_attention] == ["Max"]
    assert [s.member_id for s in result.standings] == ["y", "z", "x"]


def test_ranking_limit_is_applied():
    policy = ScoringPolicy(ranking_limit=2)
    members = [_member(str(i), f"M{i}") for i in range(5)]
    events = [ev(1, date(2025, 1, 5), "Cleaning", *[rec(str(i), "Present") for i in range(5)])]
    result = CohortAggregator(policy=policy).aggregate(members=members, events=events, window=ScoreWindow(2025))
    assert len(result.top_performers) == 2


def test_orphan_records_are_ignored_and_activity_is_counted():
    members = [_member("a", "A")]
    events = [
        ev(1, date(2025, 1, 5), "Sunday morning mass", rec("a", "Present"), rec("gone", "Absent")),
        ev(2, date(2025, 1, 6), "Daily mass", rec("a", "Present")),
        ev(3, date(2025, 1, 7), "Daily mass"),
    ]
    result = CohortAggregator().aggregate(members=members, events=events, window=ScoreWindow(2025))

    assert [s.member_id for s in result.standings] == ["a"]
    assert Category.DAILY_MASS not in result.activity_counts
    assert result.activity_counts[Category.SUNDAY_MORNING_MASS] == 1
    assert result.activity_counts[Category.CLEANING] == 0
    assert result.total_events == 2


def test_empty_snapshot_yields_zero_aggregates():
    result = CohortAggregator().aggregate(members=(), events=(), window=ScoreWindow(2025))
    assert result.total_members == 0
    assert result.average_percentage == 0.0
    assert result.top_performers == ()


def test_activity_counts_follow_the_point_table():
    policy = ScoringPolicy(point_values={Category.CLEANING: 10, Category.OTHERS: 0})
    events = [
        ev(1, date(2025, 2, 1), "Cleaning"),
        ev(2, date(2025, 2, 2), "Others"),
        ev(3, date(2025, 2, 3), "Choir meeting"),
    ]
    result = CohortAggregator(policy=policy).aggregate(members=(), events=events, window=ScoreWindow(2025, 1))
    assert dict(result.activity_counts) == {Category.CLEANING: 1}
