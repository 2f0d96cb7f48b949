import threading
from datetime import date

import pytest

from src.choir_attendance.choir_attendance.core.enums import AnomalyKind, Category
from src.choir_attendance.choir_attendance.scoring.calculator.standard_calculator import StandardScoreCalculator
from src.choir_attendance.choir_attendance.scoring.model import ScoreWindow
from src.choir_attendance.choir_attendance.scoring.service import ScoringService
from src.choir_attendance.choir_attendance.snapshots.model import Snapshot
from tests.fakes import ev, rec


class CountingCalculator(StandardScoreCalculator):
    def __init__(self):
        super().__init__()
        self.calls = 0

    def score_member(self, **kwargs):
        self.calls += 1
        return super().score_member(**kwargs)


def _snapshot(members, version=1):
    events = (ev(1, date(2025, 1, 5), "Sunday morning mass", rec("alice", "Present")),)
    return Snapshot(version=version, members=tuple(members), events=events)


def test_member_score_is_memoized_per_snapshot(members):
    calc = CountingCalculator()
    service = ScoringService(calculator=calc)
    window = ScoreWindow(2025)
    snap = _snapshot(members)

    first = service.compute_member_score(snap, "alice", window)
    assert service.compute_member_score(snap, "alice", window) is first
    assert calc.calls == 1

    second = service.compute_member_score(_snapshot(members, version=2), "alice", window)
    assert calc.calls == 2
    assert first == second
    assert first.percentage == 100.0


def test_unknown_member_gets_zero_result(members):
    result = ScoringService().compute_member_score(_snapshot(members), "nobody", ScoreWindow(2025, 0))
    assert result.points_possible == 0
    assert result.excuse_allowance == 2
    assert result.anomalies[0].kind == AnomalyKind.MISSING_REFERENCE


def test_cohort_stats(members):
    cohort = ScoringService().compute_cohort_stats(_snapshot(members), ScoreWindow(2025))
    assert cohort.total_members == 3
    assert [s.name for s in cohort.top_performers] == ["Alice"]


def test_available_years_and_months(members):
    snap = Snapshot(
        version=1,
        members=tuple(members),
        events=(
            ev(1, date(2023, 3, 5), "Cleaning"),
            ev(2, date(2025, 1, 5), "Cleaning"),
            ev(3, date(2025, 11, 5), "Cleaning"),
        ),
    )
    assert ScoringService.available_years(snap, today=date(2026, 2, 1)) == [2026, 2025, 2023]
    assert ScoringService.available_months(snap, 2025) == [0, 10]


def test_snapshots_sharing_a_version_do_not_share_results(members):
    calc = CountingCalculator()
    service = ScoringService(calculator=calc)
    window = ScoreWindow(2025)
    present = _snapshot(members)
    absent = Snapshot(
        version=present.version,
        members=present.members,
        events=(ev(1, date(2025, 1, 5), "Sunday morning mass", rec("alice", "Absent")),),
    )

    assert service.compute_member_score(present, "alice", window).percentage == 100.0
    assert service.compute_member_score(absent, "alice", window).percentage == 0.0
    assert calc.calls == 2


def test_concurrent_lookups_share_one_result(members):
    calc = CountingCalculator()
    service = ScoringService(calculator=calc)
    window = ScoreWindow(2025)
    snap = _snapshot(members)
    results = []

    def worker():
        for _ in range(50):
            results.append(service.compute_member_score(snap, "alice", window))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 400
    assert len({id(r) for r in results}) == 1


def test_cached_results_cannot_be_mutated(members):
    service = ScoringService()
    snap = _snapshot(members)
    window = ScoreWindow(2025)

    score = service.compute_member_score(snap, "alice", window)
    cohort = service.compute_cohort_stats(snap, window)
    with pytest.raises(TypeError):
        score.per_category[Category.CLEANING] = None
    with pytest.raises(TypeError):
        cohort.activity_counts[Category.CLEANING] = 99

    again = service.compute_member_score(snap, "alice", window)
    assert Category.CLEANING not in again.per_category
    assert service.compute_cohort_stats(snap, window).activity_counts[Category.CLEANING] == 0
