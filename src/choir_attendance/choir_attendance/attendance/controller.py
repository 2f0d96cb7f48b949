from __future__ import annotations

import io

from flask import Flask, request, send_file

from ..common.http import admin_required, current_role, json_body, json_errors, login_required, ok
from ..container import Container
from .model import AttendanceEvent
from .service import marks_from_payload


def event_to_dict(e: AttendanceEvent, *, with_records: bool = True) -> dict:
    out = {
        "event_id": e.event_id,
        "date": e.event_date.isoformat(),
        "category": e.category,
        "event_name": e.event_name,
        "marked": len(e.records),
    }
    if with_records:
        out["records"] = [
            {"member_id": r.member_id, "member_name": r.member_name, "status": r.status, "reason": r.reason}
            for r in e.records
        ]
    return out


def _event_args(payload: dict) -> dict:
    return dict(
        event_date=payload.get("date"),
        category=payload.get("category"),
        event_name=payload.get("event_name") or "",
        marks=marks_from_payload(payload.get("records")),
        bulk_status=payload.get("mark_unmarked_as") or None,
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_log")
    @login_required
    @json_errors
    def attendance_log():
        limit = request.args.get("limit", type=int)
        events = container.attendance_service.list_log(
            search=request.args.get("search", ""),
            category=request.args.get("category"),
            limit=limit,
        )
        return ok(events=[event_to_dict(e, with_records=False) for e in events])

    @app.route("/api/attendance", methods=["POST"], endpoint="record_attendance")
    @admin_required
    @json_errors
    def record_attendance():
        payload = json_body()
        event_id = container.attendance_service.record_event(current_role=current_role(), **_event_args(payload))
        return ok(event_id=event_id), 201

    @app.route("/api/attendance/<int:event_id>", methods=["GET"], endpoint="get_attendance")
    @login_required
    @json_errors
    def get_attendance(event_id: int):
        return ok(event=event_to_dict(container.attendance_service.get_event(event_id)))

    @app.route("/api/attendance/<int:event_id>", methods=["PUT"], endpoint="update_attendance")
    @admin_required
    @json_errors
    def update_attendance(event_id: int):
        payload = json_body()
        container.attendance_service.update_event(current_role=current_role(), event_id=event_id, **_event_args(payload))
        return ok(event=event_to_dict(container.attendance_service.get_event(event_id)))

    @app.route("/api/attendance/<int:event_id>", methods=["DELETE"], endpoint="delete_attendance")
    @admin_required
    @json_errors
    def delete_attendance(event_id: int):
        container.attendance_service.delete_event(current_role=current_role(), event_id=event_id)
        return ok(message="Attendance record deleted")

    @app.route("/api/attendance/<int:event_id>/report.pdf", methods=["GET"], endpoint="attendance_sheet_pdf")
    @admin_required
    @json_errors
    def attendance_sheet_pdf(event_id: int):
        event = container.attendance_service.get_event(event_id)
        report = container.report_service.event_sheet(event)
        payload, mimetype, filename = container.report_service.export(report, "pdf")
        return send_file(io.BytesIO(payload), mimetype=mimetype, as_attachment=True, download_name=filename)
