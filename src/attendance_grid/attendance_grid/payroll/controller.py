from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import require_non_empty
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/payroll/generate", methods=["POST"], endpoint="payroll_generate")
    def payroll_generate():
        data = request.get_json(silent=True) or {}
        month = require_non_empty(data.get("month"), "Month")
        outcome = container.payroll_service.generate(month, data.get("employee_ids") or [])
        return jsonify(outcome.to_dict()), 200
