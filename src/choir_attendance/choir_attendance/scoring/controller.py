from __future__ import annotations

import io

from flask import Flask, request, send_file, session

from ..common.datetime_utils import now_local
from ..common.http import admin_required, current_role, json_errors, login_required, ok
from ..container import Container
from ..core.exceptions import ValidationError
from ..members.service import upcoming_anniversaries, upcoming_birthdays
from .model import ScoreWindow
from .presenter import cohort_to_dict, score_to_dict


def _window() -> ScoreWindow:
    return ScoreWindow.parse(request.args.get("year"), request.args.get("month"), default_year=now_local().year)


def _celebrations(items) -> list[dict]:
    return [{"member_id": c.member_id, "name": c.name, "date": c.on.isoformat(), "years": c.years} for c in items]


def _own_member_id() -> str:
    member_id = session.get("member_id")
    if not member_id:
        raise ValidationError("Your account is not linked to a choir member")
    return member_id


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @admin_required
    @json_errors
    def dashboard():
        now = now_local()
        window = _window()
        snapshot = container.snapshot_service.load()
        cohort = container.scoring_service.compute_cohort_stats(snapshot, window)
        reminder = container.reminder_service.evaluate(role=current_role(), snapshot=snapshot, now=now)
        return ok(
            stats=cohort_to_dict(cohort),
            reminder={"show": reminder.show, "label": reminder.label, "message": reminder.message},
            birthdays=_celebrations(upcoming_birthdays(snapshot.members, now.date())),
            anniversaries=_celebrations(upcoming_anniversaries(snapshot.members, now.date())),
            available_years=container.scoring_service.available_years(snapshot, today=now.date()),
            available_months=container.scoring_service.available_months(snapshot, window.year),
        )

    @app.route("/api/dashboard/report.<fmt>", methods=["GET"], endpoint="dashboard_report")
    @admin_required
    @json_errors
    def dashboard_report(fmt: str):
        snapshot = container.snapshot_service.load()
        report = container.report_service.cohort_report(snapshot, _window())
        payload, mimetype, filename = container.report_service.export(report, fmt)
        return send_file(io.BytesIO(payload), mimetype=mimetype, as_attachment=True, download_name=filename)

    @app.route("/api/me/stats", methods=["GET"], endpoint="my_stats")
    @login_required
    @json_errors
    def my_stats():
        member_id = _own_member_id()
        snapshot = container.snapshot_service.load()
        window = _window()
        score = container.scoring_service.compute_member_score(snapshot, member_id, window)
        return ok(
            stats=score_to_dict(score, with_events=True),
            available_years=container.scoring_service.available_years(snapshot, today=now_local().date()),
            available_months=container.scoring_service.available_months(snapshot, window.year),
        )

    @app.route("/api/me/report.<fmt>", methods=["GET"], endpoint="my_report")
    @login_required
    @json_errors
    def my_report(fmt: str):
        snapshot = container.snapshot_service.load()
        report = container.report_service.member_report(snapshot, _own_member_id(), _window())
        payload, mimetype, filename = container.report_service.export(report, fmt)
        return send_file(io.BytesIO(payload), mimetype=mimetype, as_attachment=True, download_name=filename)

    @app.route("/api/reminder", methods=["GET"], endpoint="reminder")
    @admin_required
    @json_errors
    def reminder():
        snapshot = container.snapshot_service.load()
        result = container.reminder_service.evaluate(role=current_role(), snapshot=snapshot)
        return ok(reminder={"show": result.show, "label": result.label, "message": result.message})
