from __future__ import annotations

import io

from flask import Flask, request, send_file

from ..common.datetime_utils import now_local
from ..common.http import admin_required, current_role, json_body, json_errors, login_required, ok
from ..container import Container
from ..scoring.model import ScoreWindow
from ..scoring.presenter import score_to_dict
from .model import Member


def member_to_dict(m: Member) -> dict:
    return {
        "member_id": m.member_id,
        "name": m.name,
        "gender": m.gender.value,
        "dob": m.dob.isoformat() if m.dob else None,
        "marital_status": m.marital_status.value if m.marital_status else None,
        "wedding_date": m.wedding_date.isoformat() if m.wedding_date else None,
        "is_organist": m.is_organist,
        "is_sound_engineer": m.is_sound_engineer,
        "is_presentation_specialist": m.is_presentation_specialist,
        "phone": m.phone,
        "email": m.email,
        "address": m.address,
        "anbiyam": m.anbiyam,
    }


def window_from_request() -> ScoreWindow:
    return ScoreWindow.parse(request.args.get("year"), request.args.get("month"), default_year=now_local().year)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/members", methods=["GET"], endpoint="list_members")
    @login_required
    @json_errors
    def list_members():
        return ok(members=[member_to_dict(m) for m in container.member_service.list_members()])

    @app.route("/api/members", methods=["POST"], endpoint="create_member")
    @admin_required
    @json_errors
    def create_member():
        member_id = container.member_service.create_member(current_role=current_role(), data=json_body())
        return ok(member_id=member_id), 201

    @app.route("/api/members/<member_id>", methods=["GET"], endpoint="get_member")
    @login_required
    @json_errors
    def get_member(member_id: str):
        return ok(member=member_to_dict(container.member_service.get_member(member_id)))

    @app.route("/api/members/<member_id>", methods=["PUT"], endpoint="update_member")
    @admin_required
    @json_errors
    def update_member(member_id: str):
        member = container.member_service.update_member(
            current_role=current_role(), member_id=member_id, data=json_body()
        )
        return ok(member=member_to_dict(member))

    @app.route("/api/members/<member_id>", methods=["DELETE"], endpoint="delete_member")
    @admin_required
    @json_errors
    def delete_member(member_id: str):
        container.member_service.delete_member(current_role=current_role(), member_id=member_id)
        return ok(message="Member deleted")

    @app.route("/api/members/<member_id>/stats", methods=["GET"], endpoint="member_stats")
    @admin_required
    @json_errors
    def member_stats(member_id: str):
        container.member_service.get_member(member_id)
        snapshot = container.snapshot_service.load()
        score = container.scoring_service.compute_member_score(snapshot, member_id, window_from_request())
        return ok(stats=score_to_dict(score, with_events=True))

    @app.route("/api/members/<member_id>/report.<fmt>", methods=["GET"], endpoint="member_report")
    @admin_required
    @json_errors
    def member_report(member_id: str, fmt: str):
        snapshot = container.snapshot_service.load()
        report = container.report_service.member_report(snapshot, member_id, window_from_request())
        payload, mimetype, filename = container.report_service.export(report, fmt)
        return send_file(io.BytesIO(payload), mimetype=mimetype, as_attachment=True, download_name=filename)
