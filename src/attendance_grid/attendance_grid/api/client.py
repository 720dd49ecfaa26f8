"""Client for the CRM REST backend (employees, holidays, attendance, projects, payroll)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import requests

from ..attendance.model import Employee, Holiday
from ..core.constants import DEFAULT_EMPLOYEE_FETCH_LIMIT, DEFAULT_REQUEST_TIMEOUT
from ..core.exceptions import ApiError
from .schemas import (
    AttendanceSummaryResponse,
    ComputeAttendanceResponse,
    ComputedAttendanceRecord,
    FlatRecord,
    PayrollGenerationResponse,
    ProjectRecord,
    SaveResult,
    parse,
    parse_employees,
    parse_holidays,
    parse_list,
    parse_projects,
)

logger = logging.getLogger(__name__)


@dataclass
class ApiConfig:
    base_url: str
    token: Optional[str] = None
    timeout: int = DEFAULT_REQUEST_TIMEOUT


class CrmApiClient:
    """Thin JSON-over-HTTP wrapper; every failure surfaces as :class:`ApiError`."""

    def __init__(self, config: ApiConfig, *, session: Optional[requests.Session] = None):
        self._config = config
        self._base_url = config.base_url.rstrip("/")
        self._session = session or requests.Session()
        if config.token:
            self._session.headers.update({"Authorization": f"Bearer {config.token}"})

    def _request(self, method: str, path: str, *, params: Optional[dict] = None, json: Any = None) -> dict:
        url = f"{self._base_url}{path}"
        try:
            resp = self._session.request(method, url, params=params, json=json, timeout=self._config.timeout)
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise ApiError(f"Network error while contacting {path}") from e

        try:
            data = resp.json()
        except ValueError:
            data = None

        if not resp.ok:
            message = _error_message(data) or f"{method} {path} returned {resp.status_code}"
            logger.error("%s %s returned %s: %s", method, path, resp.status_code, message)
            raise ApiError(message, status_code=resp.status_code)
        if not isinstance(data, dict):
            logger.error("%s %s returned a non-JSON body", method, path)
            raise ApiError(f"Unexpected response from {path}", status_code=resp.status_code)
        if data.get("success") is False:
            message = _error_message(data) or f"{path} reported failure"
            logger.error("%s %s reported failure: %s", method, path, message)
            raise ApiError(message, status_code=resp.status_code)
        return data

    def get_employees(self, *, limit: int = DEFAULT_EMPLOYEE_FETCH_LIMIT, status: str = "active") -> list[Employee]:
        data = self._request("GET", "/api/employees", params={"limit": limit, "status": status})
        return parse_employees(data)

    def get_holidays(self, year: int) -> list[Holiday]:
        data = self._request("GET", "/api/masters/holidays", params={"year": year})
        return parse_holidays(data)

    def get_attendance(self, month_key: str) -> AttendanceSummaryResponse:
        data = self._request("GET", "/api/attendance", params={"month": month_key})
        return parse(AttendanceSummaryResponse, data)

    def save_attendance(self, records: Sequence[FlatRecord], month_key: str) -> SaveResult:
        body = {"attendance_records": [r.model_dump() for r in records], "month": month_key}
        data = self._request("POST", "/api/attendance", json=body)
        return parse(SaveResult, data)

    def get_projects(self) -> list[ProjectRecord]:
        data = self._request("GET", "/api/projects/list")
        return parse_projects(data)

    def update_project_status(self, project_id, status: str) -> dict:
        return self._request("PUT", f"/api/projects/{project_id}", json={"status": status})

    def compute_attendance(self, start_date: str, end_date: str, *, overwrite: bool = True) -> ComputeAttendanceResponse:
        body = {"startDate": start_date, "endDate": end_date, "overwrite": overwrite}
        data = self._request("POST", "/api/smartoffice/compute-attendance", json=body)
        return parse(ComputeAttendanceResponse, data)

    def get_computed_attendance(self, start_date: str, end_date: str) -> list[ComputedAttendanceRecord]:
        params = {"startDate": start_date, "endDate": end_date, "includeDetails": "true"}
        data = self._request("GET", "/api/smartoffice/compute-attendance", params=params)
        return parse_list(ComputedAttendanceRecord, data.get("data") or [])

    def generate_payroll(self, body: dict) -> PayrollGenerationResponse:
        data = self._request("POST", "/api/payroll/generate", json=body)
        return parse(PayrollGenerationResponse, data)


def _error_message(data: Any) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    message = data.get("error") or data.get("details") or data.get("message")
    if message and data.get("suggestion"):
        message = f"{message}\n\n{data['suggestion']}"
    return str(message) if message else None
