from __future__ import annotations

import io
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..model import Report, ReportTable

HEADER_COLOR = colors.HexColor("#4f46e5")


def _styles():
    styles = getSampleStyleSheet()
    return {
        "title": styles["Title"],
        "subtitle": ParagraphStyle("Subtitle", parent=styles["Normal"], fontSize=11, textColor=colors.HexColor("#475569")),
        "section": ParagraphStyle("Section", parent=styles["Heading3"], textColor=HEADER_COLOR, spaceBefore=10),
        "head": ParagraphStyle("Head", parent=styles["Normal"], fontSize=9, textColor=colors.whitesmoke),
        "body": ParagraphStyle("Body", parent=styles["Normal"], fontSize=9, leading=11),
    }


def _table(table: ReportTable, styles) -> Table:
    data = [[Paragraph(escape(str(c)), styles["head"]) for c in table.columns]]
    for row in table.rows:
        data.append([Paragraph(escape(str(cell)), styles["body"]) for cell in row])
    if len(data) == 1:
        data.append([Paragraph("No data", styles["body"])] + [""] * (len(table.columns) - 1))

    t = Table(data, repeatRows=1, hAlign="LEFT")
    t.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), HEADER_COLOR),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("GRID", (0, 0), (-1, -1), 0.4, colors.HexColor("#9ca3af")),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f8fafc")]),
            ]
        )
    )
    return t


def render_pdf(report: Report) -> bytes:
    """Render every table of ``report`` into one A4 document."""
    buffer = io.BytesIO()
    styles = _styles()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=28,
        rightMargin=28,
        topMargin=28,
        bottomMargin=28,
        title=report.title,
    )

    elements = [Paragraph(escape(report.title), styles["title"])]
    if report.subtitle:
        elements.append(Paragraph(escape(report.subtitle), styles["subtitle"]))
    elements.append(Spacer(1, 12))

    for table in report.tables:
        elements.append(Paragraph(escape(table.title), styles["section"]))
        elements.append(_table(table, styles))
        elements.append(Spacer(1, 8))

    doc.build(elements)
    return buffer.getvalue()
