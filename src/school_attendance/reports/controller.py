from __future__ import annotations

import csv
import io

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.responses import api_view, roster_filters
from ..container import Container
from .service import REPORT_FIELDS


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    views = {
        "attendance": reports.attendance_for_date,
        "absent": reports.absent_for_date,
        "late": reports.late_for_date,
        "absent-late": reports.absent_or_late_for_date,
    }

    def _write_report_csv(*, rows: list[dict], filename: str):
        """Write report rows to a CSV download (UTF-8 with BOM for Excel)."""

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow({k: ("" if row.get(k) is None else row[k]) for k in REPORT_FIELDS})

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    def _report(report: str, date_s: str):
        """JSON rows, or a CSV download when the date carries a .csv suffix."""

        as_csv = date_s.endswith(".csv")
        attendance_date = parse_iso_date(date_s[: -len(".csv")] if as_csv else date_s)
        rows = views[report](attendance_date, **roster_filters())
        if not as_csv:
            return jsonify(rows)

        filename = f"{report.replace('-', '_')}_{attendance_date.strftime('%Y%m%d')}.csv"
        return _write_report_csv(rows=rows, filename=filename)

    @app.route("/api/attendance/<date_s>", methods=["GET"], endpoint="api_attendance_for_date")
    @api_view
    def api_attendance_for_date(date_s: str):
        return _report("attendance", date_s)

    @app.route("/api/absent/<date_s>", methods=["GET"], endpoint="api_absent_for_date")
    @api_view
    def api_absent_for_date(date_s: str):
        return _report("absent", date_s)

    @app.route("/api/late/<date_s>", methods=["GET"], endpoint="api_late_for_date")
    @api_view
    def api_late_for_date(date_s: str):
        return _report("late", date_s)

    @app.route("/api/absent-late/<date_s>", methods=["GET"], endpoint="api_absent_late_for_date")
    @api_view
    def api_absent_late_for_date(date_s: str):
        return _report("absent-late", date_s)

    @app.route("/api/stats", methods=["GET"], endpoint="api_stats")
    @api_view
    def api_stats():
        date_s = request.args.get("date")
        return jsonify(reports.daily_stats(parse_iso_date(date_s) if date_s else None))
