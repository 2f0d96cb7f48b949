from __future__ import annotations

from .model import CohortResult, MemberStanding, ScoreResult, ScoreWindow


def _round(value: float) -> float:
    return round(float(value), 2)


def window_to_dict(window: ScoreWindow) -> dict:
    return {"year": window.year, "month": window.month, "label": window.label}


def score_to_dict(score: ScoreResult, *, with_events: bool = False) -> dict:
    out = {
        "member_id": score.member_id,
        "window": window_to_dict(score.window),
        "points_earned": _round(score.points_earned),
        "points_possible": _round(score.points_possible),
        "percentage": _round(score.percentage),
        "excused_count": score.excused_count,
        "excused_but_present_count": score.excused_but_present_count,
        "excuse_allowance": score.excuse_allowance,
        "excuse_balance": score.excuse_balance,
        "per_category": [
            {
                "category": c.value,
                "count": s.count,
                "points_earned": _round(s.points_earned),
                "points_possible": _round(s.points_possible),
                "percentage": _round(s.percentage),
            }
            for c, s in score.per_category.items()
        ],
        "anomalies": len(score.anomalies),
    }
    if with_events:
        out["events"] = [
            {
                "event_id": e.event_id,
                "date": e.event_date.isoformat(),
                "category": e.category.value,
                "status": e.status,
                "effective_status": e.effective_status.value if e.effective_status else None,
                "points_earned": _round(e.points_earned),
                "points_possible": _round(e.points_possible),
            }
            for e in score.events
        ]
    return out


def standing_to_dict(s: MemberStanding) -> dict:
    return {
        "member_id": s.member_id,
        "name": s.name,
        "gender": s.gender.value if s.gender else None,
        "points_earned": _round(s.points_earned),
        "points_possible": _round(s.points_possible),
        "percentage": _round(s.percentage),
    }


def cohort_to_dict(cohort: CohortResult) -> dict:
    return {
        "window": window_to_dict(cohort.window),
        "total_members": cohort.total_members,
        "total_events": cohort.total_events,
        "average_percentage": _round(cohort.average_percentage),
        "men_average_percentage": _round(cohort.men_average_percentage),
        "women_average_percentage": _round(cohort.women_average_percentage),
        "top_performers": [standing_to_dict(s) for s in cohort.top_performers],
        "needs_attention": [standing_to_dict(s) for s in cohort.needs_attention],
        "activity_counts": {c.value: n for c, n in cohort.activity_counts.items()},
    }
