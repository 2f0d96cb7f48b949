from datetime import date

import pytest

from src.choir_attendance.choir_attendance.core.enums import Gender, TeamType
from src.choir_attendance.choir_attendance.members.model import Member
from src.choir_attendance.choir_attendance.reports.builder import (
    BREAKDOWN,
    EVENT_LOG,
    SUMMARY,
    TOP_PERFORMERS,
    ReportDataBuilder,
    build_report_rows,
)
from src.choir_attendance.choir_attendance.reports.model import ReportKind
from src.choir_attendance.choir_attendance.scoring.model import ScoreWindow
from src.choir_attendance.choir_attendance.scoring.service import ScoringService
from src.choir_attendance.choir_attendance.snapshots.model import Snapshot
from src.choir_attendance.choir_attendance.teams.model import Team
from tests.fakes import ev, rec

EVENTS = (
    ev(1, date(2025, 1, 5), "Sunday morning mass", rec("alice", "Present")),
    ev(2, date(2025, 1, 7), "Others", rec("alice", "Excused", "exam"), name="Carol night"),
    ev(3, date(2025, 1, 8), "Others", rec("bob", "Present")),
    ev(4, date(2025, 1, 11), "Saturday practice", rec("alice", "Absent", "ignored")),
)


@pytest.fixture
def snapshot(members):
    return Snapshot(version=1, members=tuple(members), events=EVENTS)


def test_event_log_placeholders_and_reasons(snapshot):
    score = ScoringService().compute_member_score(snapshot, "alice", ScoreWindow(2025, 0))
    report = build_report_rows(score, ReportKind.MONTHLY_MEMBER, member_name="Alice", events=snapshot.events)
    log = report.table(EVENT_LOG)

    assert log.columns == ("Date", "Type", "Event Name", "Status", "Reason")
    assert log.rows == (
        ("05/01/2025", "Sunday morning mass", "-", "Present", "-"),
        ("07/01/2025", "Others", "Carol night", "Excused", "exam"),
        ("08/01/2025", "Others", "-", "Not Marked", "-"),
        ("11/01/2025", "Saturday practice", "-", "Absent", "-"),
    )


def test_monthly_report_summary_breakdown_and_filename(snapshot):
    score = ScoringService().compute_member_score(snapshot, "alice", ScoreWindow(2025, 0))
    report = ReportDataBuilder().member_report(member_name="Alice Maria", score=score, events=snapshot.events)

    assert report.kind == ReportKind.MONTHLY_MEMBER
    assert report.filename("pdf") == "Monthly_Report_Alice_Maria_2025_1.pdf"
    summary = dict(report.table(SUMMARY).rows)
    assert summary["Total Points Earned"] == "32.0 / 65.0"
    assert summary["Excuse Balance"] == "1 / 2"
    assert summary["Excused Absences"] == "1"

    breakdown = report.table(BREAKDOWN)
    assert breakdown.columns == ("Gathering Type", "Count", "Points", "Percentage")
    assert [r[0] for r in breakdown.rows] == ["Saturday practice", "Sunday morning mass", "Others"]


def test_yearly_report_filename_and_columns(snapshot):
    score = ScoringService().compute_member_score(snapshot, "alice", ScoreWindow(2025))
    report = build_report_rows(score, "yearly_member", member_name="Alice", events=snapshot.events)
    assert report.filename("csv") == "Yearly_Report_2025_Alice.csv"
    assert report.table(BREAKDOWN).columns == ("Gathering Type", "Points", "Percentage")
    assert dict(report.table(SUMMARY).rows)["Excuse Balance"] == "23 / 24"


def test_monthly_builder_rejects_yearly_window(snapshot):
    score = ScoringService().compute_member_score(snapshot, "alice", ScoreWindow(2025))
    with pytest.raises(ValueError):
        ReportDataBuilder().monthly_member_report(member_name="Alice", score=score, events=snapshot.events)


def test_cohort_dashboard_rows(snapshot):
    cohort = ScoringService().compute_cohort_stats(snapshot, ScoreWindow(2025, 0))
    report = build_report_rows(cohort, ReportKind.COHORT_DASHBOARD)
    assert report.basename == "Dashboard_2025_01"
    assert report.table(TOP_PERFORMERS).rows == (("Bob", "100.0%"),)


def test_event_sheet_sorted_by_name():
    event = ev(
        9,
        date(2025, 2, 1),
        "Special mass",
        rec("z", "Present", name="zoe"),
        rec("a", "Excused", "sick", name="Adam"),
        name="Feast",
    )
    report = ReportDataBuilder().event_sheet(event)
    assert report.basename == "attendance_2025-02-01_Special-mass"
    assert report.subtitle == "Feast on 01/02/2025"
    assert report.tables[0].rows == (("Adam", "Excused", "sick"), ("zoe", "Present", "-"))


def test_team_roster_orders_organists_then_women(members):
    extra = Member(member_id="dave", name="Dave", gender=Gender.MALE)
    by_id = {m.member_id: m for m in [*members, extra]}
    teams = [
        Team(1, "Team A", TeamType.SUNDAY, frozenset({"alice", "bob", "carol", "gone"})),
        Team(2, "Empty", TeamType.SUNDAY),
        Team(3, "Wedding", TeamType.MARRIAGE, frozenset({"dave"})),
    ]
    report = ReportDataBuilder().team_roster(team_type=TeamType.SUNDAY, teams=teams, members=by_id, unassigned=[extra])

    assert report.basename == "Sunday_Teams_Report"
    rows = report.tables[0].rows
    assert rows[0] == ("Empty (0 Members)", "- No members in this team -")
    assert [r[1] for r in rows[1:4]] == ["Carol (Organist)", "Alice", "Bob"]
    assert rows[-1] == ("Unassigned (1 Members)", "Dave")
