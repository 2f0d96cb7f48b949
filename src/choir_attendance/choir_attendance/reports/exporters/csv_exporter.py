from __future__ import annotations

import csv
import io

from ..model import Report


def render_csv(report: Report) -> bytes:
    """Flatten the report into one CSV, tables separated by a blank line.

    Each block starts with the table title, then the column header. The
    output is UTF-8 with BOM so spreadsheet apps open it correctly.
    """
    out = io.StringIO()
    writer = csv.writer(out)
    for i, table in enumerate(report.tables):
        if i:
            writer.writerow([])
        writer.writerow([table.title])
        writer.writerow(table.columns)
        writer.writerows(table.rows)
    return out.getvalue().encode("utf-8-sig")
