"""Example: use the service layer directly (no Flask).

Prints the current year's cohort summary and one member's score.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.choir_attendance.choir_attendance.container import build_container
from src.choir_attendance.choir_attendance.scoring.model import ScoreWindow


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, scoring=getattr(settings, "SCORING", None))

    snapshot = container.snapshot_service.load()
    window = ScoreWindow(year=date.today().year)
    cohort = container.scoring_service.compute_cohort_stats(snapshot, window)
    print(f"{window.label}: {cohort.total_members} members, {cohort.total_events} events, "
          f"average {cohort.average_percentage:.1f}%")

    for member in snapshot.members[:1]:
        score = container.scoring_service.compute_member_score(snapshot, member.member_id, window)
        print(f"{member.name}: {score.points_earned:.1f} / {score.points_possible:.1f} ({score.percentage:.1f}%)")


if __name__ == "__main__":
    main()
