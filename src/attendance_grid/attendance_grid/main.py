from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.exceptions import ApiError, ValidationError
from .payroll.controller import register as register_payroll
from .projects.controller import register as register_projects

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    api_config = getattr(settings, "API_CONFIG")
    logger.info("settings=%s api=%s", settings_module, api_config.get("base_url"))

    if container is None:
        container = build_container(
            api_config=api_config,
            employee_limit=int(getattr(settings, "EMPLOYEE_FETCH_LIMIT", 1000)),
        )

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        return jsonify({"success": False, "message": str(e)}), 400

    @app.errorhandler(ApiError)
    def handle_api_error(e: ApiError):
        return jsonify({"success": False, "message": str(e)}), 502

    register_attendance(app, container)
    register_projects(app, container)
    register_payroll(app, container)

    return app
