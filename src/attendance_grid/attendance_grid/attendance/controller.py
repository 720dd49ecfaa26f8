from __future__ import annotations

import csv
import io

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_month_key
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _grid_response(outcome=None, status: int = 200):
        body = {"grid": service.grid(request.args.get("q"))}
        if outcome is not None:
            body.update(outcome.to_dict())
        else:
            body["success"] = service.state.error is None
        return jsonify(body), status

    def _needs_load() -> bool:
        # A failed roster fetch leaves an empty grid; the next view retries it.
        return not service.state.days or service.state.error is not None

    @app.route("/attendance", methods=["GET"], endpoint="attendance_grid")
    def attendance_grid():
        month = request.args.get("month")
        outcome = None
        if month:
            year, month0 = parse_month_key(month)
            if _needs_load() or (year, month0) != (service.state.year, service.state.month):
                outcome = service.open_month(year, month0)
        elif not service.state.days:
            outcome = service.current_month()
        elif service.state.error is not None:
            outcome = service.open_month(service.state.year, service.state.month)
        return _grid_response(outcome)

    @app.route("/attendance/navigate", methods=["POST"], endpoint="attendance_navigate")
    def attendance_navigate():
        data = request.get_json(silent=True) or {}
        direction = data.get("direction")
        if data.get("month"):
            outcome = service.open_month(*parse_month_key(data["month"]))
        elif direction == "prev":
            outcome = service.previous_month()
        elif direction == "next":
            outcome = service.next_month()
        else:
            outcome = service.current_month()
        return _grid_response(outcome)

    @app.route("/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    def attendance_mark():
        data = request.get_json(silent=True) or {}
        try:
            employee_id = int(data.get("employee_id"))
        except (TypeError, ValueError):
            return jsonify({"success": False, "message": "employee_id is required"}), 400
        outcome = service.mark(
            employee_id,
            data.get("start_date") or data.get("date"),
            data.get("end_date"),
            data.get("attendance_type") or "P",
            in_time=data.get("in_time"),
            out_time=data.get("out_time"),
            reason=data.get("reason"),
        )
        return _grid_response(outcome)

    @app.route("/attendance/save", methods=["POST"], endpoint="attendance_save")
    def attendance_save():
        outcome = service.save()
        return jsonify(outcome.to_dict()), 200

    @app.route("/attendance/reload", methods=["POST"], endpoint="attendance_reload")
    def attendance_reload():
        return _grid_response(service.reload_saved())

    @app.route("/attendance/sync", methods=["POST"], endpoint="attendance_sync")
    def attendance_sync():
        return _grid_response(service.sync_biometric())

    @app.route("/attendance/export.csv", methods=["GET"], endpoint="attendance_export_csv")
    def attendance_export_csv():
        fieldnames, rows = service.export_rows()
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        filename = f"attendance_{service.state.month_key}.csv"
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
