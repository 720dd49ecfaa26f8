from __future__ import annotations

import pytest
import requests

from src.attendance_grid.attendance_grid.api.client import ApiConfig, CrmApiClient
from src.attendance_grid.attendance_grid.api.schemas import FlatRecord
from src.attendance_grid.attendance_grid.core.exceptions import ApiError


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, responses=None, error=None):
        self.headers = {}
        self.calls = []
        self._responses = list(responses or [])
        self._error = error

    def request(self, method, url, params=None, json=None, timeout=None):
        self.calls.append({"method": method, "url": url, "params": params, "json": json, "timeout": timeout})
        if self._error:
            raise self._error
        return self._responses.pop(0)


def _client(session, token=None):
    return CrmApiClient(ApiConfig(base_url="http://crm.test/", token=token, timeout=5), session=session)


def test_employees_accepts_either_list_key():
    session = FakeSession(
        [
            FakeResponse(payload={"employees": [{"id": 1, "employee_id": "E1", "first_name": "Asha", "last_name": "Rao"}]}),
            FakeResponse(payload={"data": [{"id": 2, "employee_id": 22, "first_name": "Vikram", "biometric_code": 101}]}),
        ]
    )
    client = _client(session, token="abc")

    first = client.get_employees(limit=50)
    second = client.get_employees()

    assert first[0].name == "Asha Rao"
    assert first[0].employee_code == "E1"
    assert second[0].employee_code == "22"
    assert second[0].biometric_code == "101"
    assert session.calls[0]["url"] == "http://crm.test/api/employees"
    assert session.calls[0]["params"] == {"limit": 50, "status": "active"}
    assert session.headers["Authorization"] == "Bearer abc"


def test_holidays_keep_date_part():
    session = FakeSession([FakeResponse(payload={"success": True, "data": [{"date": "2024-02-24T00:00:00.000Z", "name": "Fest"}]})])

    holidays = _client(session).get_holidays(2024)

    assert holidays[0].date == "2024-02-24"
    assert session.calls[0]["params"] == {"year": 2024}


def test_save_posts_records_and_month():
    session = FakeSession([FakeResponse(payload={"success": True, "successCount": 1, "errorCount": 0})])
    record = FlatRecord(employee_id=1, attendance_date="2024-02-05", status="P", overtime_hours=1.5, out_time="19:00")

    result = _client(session).save_attendance([record], "2024-02")

    body = session.calls[0]["json"]
    assert session.calls[0]["method"] == "POST"
    assert body["month"] == "2024-02"
    assert body["attendance_records"][0]["overtime_hours"] == 1.5
    assert body["attendance_records"][0]["is_weekly_off"] is False
    assert result.success_count == 1


def test_http_error_uses_server_message():
    session = FakeSession([FakeResponse(500, {"error": "Failed to fetch attendance"})])

    with pytest.raises(ApiError) as exc:
        _client(session).get_attendance("2024-02")

    assert str(exc.value) == "Failed to fetch attendance"
    assert exc.value.status_code == 500


def test_success_false_is_an_error():
    session = FakeSession([FakeResponse(200, {"success": False, "error": "No payroll profile", "suggestion": "Add one"})])

    with pytest.raises(ApiError) as exc:
        _client(session).generate_payroll({"month": "2024-02-01", "all": True})

    assert str(exc.value) == "No payroll profile\n\nAdd one"


def test_network_and_body_errors():
    with pytest.raises(ApiError):
        _client(FakeSession(error=requests.ConnectionError("down"))).get_holidays(2024)

    with pytest.raises(ApiError):
        _client(FakeSession([FakeResponse(200, None)])).get_holidays(2024)

    with pytest.raises(ApiError):
        _client(FakeSession([FakeResponse(200, {"data": [{"name": "no id"}]})])).get_employees()


def test_project_status_update():
    session = FakeSession([FakeResponse(200, {"success": True})])

    _client(session).update_project_status(12, "completed")

    assert session.calls[0]["method"] == "PUT"
    assert session.calls[0]["url"] == "http://crm.test/api/projects/12"
    assert session.calls[0]["json"] == {"status": "completed"}
