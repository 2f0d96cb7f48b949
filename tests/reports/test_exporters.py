import pytest

from src.choir_attendance.choir_attendance.core.exceptions import ValidationError
from src.choir_attendance.choir_attendance.reports.exporters.csv_exporter import render_csv
from src.choir_attendance.choir_attendance.reports.exporters.pdf_exporter import render_pdf
from src.choir_attendance.choir_attendance.reports.model import Report, ReportKind, ReportTable
from src.choir_attendance.choir_attendance.reports.service import ReportService
from src.choir_attendance.choir_attendance.scoring.service import ScoringService

REPORT = Report(
    kind=ReportKind.EVENT_SHEET,
    title="Attendance Report: Others",
    subtitle="Rock & Roll <night> on 01/02/2025",
    basename="attendance_2025-02-01_Others",
    tables=(
        ReportTable(title="Attendance", columns=("Member Name", "Status", "Reason"), rows=(("Zoë", "Present", "-"),)),
        ReportTable(title="Empty", columns=("A", "B")),
    ),
)


def test_pdf_export_produces_a_pdf_document():
    payload = render_pdf(REPORT)
    assert payload.startswith(b"%PDF")
    assert len(payload) > 500


def test_csv_export_has_bom_titles_and_rows():
    text = render_csv(REPORT).decode("utf-8-sig")
    lines = text.splitlines()
    assert lines[0] == "Attendance"
    assert lines[1] == "Member Name,Status,Reason"
    assert lines[2] == "Zoë,Present,-"
    assert lines[3] == ""
    assert lines[4] == "Empty"


def test_report_service_export_picks_format():
    service = ReportService(ScoringService())
    payload, mimetype, filename = service.export(REPORT, "csv")
    assert mimetype == "text/csv"
    assert filename == "attendance_2025-02-01_Others.csv"
    with pytest.raises(ValidationError):
        service.export(REPORT, "xlsx")
