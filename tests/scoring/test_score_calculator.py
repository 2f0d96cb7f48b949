from datetime import date

import pytest

from src.choir_attendance.choir_attendance.core.enums import AnomalyKind, Category
from src.choir_attendance.choir_attendance.scoring.calculator.standard_calculator import StandardScoreCalculator
from src.choir_attendance.choir_attendance.scoring.model import ScoreWindow
from tests.fakes import ev, rec

SMM = "Sunday morning mass"


def _january_events():
    return [
        ev(1, date(2025, 1, 5), SMM, rec("m1", "Present")),
        ev(2, date(2025, 1, 12), SMM, rec("m1", "Excused", "travel")),
        ev(3, date(2025, 1, 19), SMM, rec("m1", "Excused", "travel")),
        ev(4, date(2025, 1, 26), SMM, rec("m1", "Excused", "travel")),
    ]


def test_end_to_end_january_with_capped_excuse():
    calc = StandardScoreCalculator()
    result = calc.score_member(member_id="m1", window=ScoreWindow(2025, 0), events=_january_events())

    assert result.points_earned == pytest.approx(42.0)
    assert result.points_possible == pytest.approx(120.0)
    assert result.percentage == pytest.approx(35.0)
    assert result.excused_count == 3
    assert result.excuse_allowance == 2
    assert result.excuse_balance == 0
    assert [e.multiplier for e in result.events[1:]] == [0.2, 0.2, 0.0]

    smm = result.per_category[Category.SUNDAY_MORNING_MASS]
    assert smm.count == 4
    assert smm.percentage == pytest.approx(35.0)


def test_yearly_window_uses_yearly_allowance():
    calc = StandardScoreCalculator()
    result = calc.score_member(member_id="m1", window=ScoreWindow(2025), events=_january_events())
    assert result.excuse_allowance == 24
    assert result.excuse_balance == 21


def test_excused_but_present_is_counted_and_never_downgraded():
    events = [ev(i, date(2025, 3, i), "Saturday practice", rec("m1", "Excused but Present", "late")) for i in range(1, 6)]
    result = StandardScoreCalculator().score_member(member_id="m1", window=ScoreWindow(2025, 2), events=events)
    assert [e.multiplier for e in result.events] == [0.4] * 5
    assert result.excused_but_present_count == 5
    assert result.excused_count == 0
    assert result.percentage == pytest.approx(40.0)


def test_unmarked_members_and_daily_mass_are_left_out():
    events = [
        ev(1, date(2025, 1, 5), SMM, rec("other", "Present")),
        ev(2, date(2025, 1, 6), "Daily mass", rec("m1", "Present")),
        ev(3, date(2025, 1, 11), "Saturday practice", rec("m1", "Present")),
    ]
    result = StandardScoreCalculator().score_member(member_id="m1", window=ScoreWindow(2025), events=events)
    assert result.points_possible == 25
    assert result.percentage == 100.0
    assert len(result.events) == 1


def test_events_outside_window_are_ignored():
    events = [
        ev(1, date(2024, 12, 29), SMM, rec("m1", "Absent")),
        ev(2, date(2025, 2, 2), SMM, rec("m1", "Present")),
    ]
    result = StandardScoreCalculator().score_member(member_id="m1", window=ScoreWindow(2025, 0), events=events)
    assert result.points_possible == 0
    assert result.percentage == 0.0


def test_empty_snapshot_gives_zero_result():
    result = StandardScoreCalculator().score_member(member_id="m1", window=ScoreWindow(2025), events=())
    assert result.points_earned == 0
    assert result.percentage == 0.0
    assert result.per_category == {}


def test_unknown_status_scores_zero_and_is_reported():
    events = [
        ev(1, date(2025, 1, 5), SMM, rec("m1", "Late")),
        ev(2, date(2025, 1, 12), SMM, rec("m1", "Excused")),
    ]
    result = StandardScoreCalculator().score_member(member_id="m1", window=ScoreWindow(2025), events=events)
    assert result.points_possible == 60
    assert result.points_earned == pytest.approx(6.0)
    kinds = [a.kind for a in result.anomalies]
    assert kinds == [AnomalyKind.UNKNOWN_STATUS, AnomalyKind.MISSING_REASON]


def test_unsorted_input_is_scored_chronologically():
    events = list(reversed(_january_events()))
    result = StandardScoreCalculator().score_member(member_id="m1", window=ScoreWindow(2025, 0), events=events)
    assert [e.event_id for e in result.events] == [1, 2, 3, 4]
    assert result.points_earned == pytest.approx(42.0)


def test_scoring_is_idempotent():
    calc = StandardScoreCalculator()
    events = _january_events()
    a = calc.score_member(member_id="m1", window=ScoreWindow(2025), events=events)
    b = calc.score_member(member_id="m1", window=ScoreWindow(2025), events=events)
    assert a == b


def test_window_rejects_month_out_of_range():
    with pytest.raises(ValueError):
        ScoreWindow(2025, 12)
    assert ScoreWindow.parse("2025", "all") == ScoreWindow(2025)
    assert ScoreWindow.parse("", "3", default_year=2024) == ScoreWindow(2024, 3)
