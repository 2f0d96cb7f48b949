from __future__ import annotations

import io

from flask import Flask, request, send_file

from ..common.http import admin_required, current_role, json_body, json_errors, login_required, ok
from ..container import Container
from ..core.enums import TeamType
from .model import Team


def team_to_dict(t: Team, names: dict) -> dict:
    return {
        "team_id": t.team_id,
        "name": t.name,
        "team_type": t.team_type.value,
        "member_ids": sorted(t.member_ids),
        "members": sorted((names[i] for i in t.member_ids if i in names), key=str.casefold),
    }


def register(app: Flask, container: Container) -> None:
    def _names() -> dict:
        return {m.member_id: m.name for m in container.member_service.list_members()}

    @app.route("/api/teams", methods=["GET"], endpoint="list_teams")
    @login_required
    @json_errors
    def list_teams():
        team_type = request.args.get("type") or None
        names = _names()
        out = {"teams": [team_to_dict(t, names) for t in container.team_service.list_teams(team_type)]}
        if team_type:
            out["unassigned"] = [
                {"member_id": m.member_id, "name": m.name} for m in container.team_service.unassigned_members(team_type)
            ]
        return ok(**out)

    @app.route("/api/teams", methods=["POST"], endpoint="create_team")
    @admin_required
    @json_errors
    def create_team():
        payload = json_body()
        team_id = container.team_service.create_team(
            current_role=current_role(),
            name=payload.get("name", ""),
            team_type=payload.get("team_type"),
            member_ids=payload.get("member_ids") or (),
        )
        return ok(team_id=team_id), 201

    @app.route("/api/teams/<int:team_id>", methods=["PUT"], endpoint="update_team")
    @admin_required
    @json_errors
    def update_team(team_id: int):
        payload = json_body()
        team = container.team_service.update_team(
            current_role=current_role(),
            team_id=team_id,
            name=payload.get("name"),
            member_ids=payload.get("member_ids"),
        )
        return ok(team=team_to_dict(team, _names()))

    @app.route("/api/teams/<int:team_id>", methods=["DELETE"], endpoint="delete_team")
    @admin_required
    @json_errors
    def delete_team(team_id: int):
        container.team_service.delete_team(current_role=current_role(), team_id=team_id)
        return ok(message="Team deleted")

    @app.route("/api/teams/report.pdf", methods=["GET"], endpoint="teams_report_pdf")
    @admin_required
    @json_errors
    def teams_report_pdf():
        team_type = TeamType(request.args.get("type") or TeamType.SUNDAY.value)
        members = container.member_service.list_members()
        report = container.report_service.team_roster(
            team_type,
            teams=container.team_service.list_teams(team_type),
            members=members,
            unassigned=container.team_service.unassigned_members(team_type, members),
        )
        payload, mimetype, filename = container.report_service.export(report, "pdf")
        return send_file(io.BytesIO(payload), mimetype=mimetype, as_attachment=True, download_name=filename)
