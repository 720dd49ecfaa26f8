from __future__ import annotations

from datetime import date

import pytest

from src.attendance_grid.attendance_grid.api.schemas import AttendanceSummaryResponse, ProjectRecord, SaveResult
from src.attendance_grid.attendance_grid.attendance.model import Employee
from src.attendance_grid.attendance_grid.container import build_container
from src.attendance_grid.attendance_grid.core.exceptions import ApiError
from src.attendance_grid.attendance_grid.main import create_app


class FakeApi:
    def __init__(self):
        self.saved = []
        self.status_updates = []
        self.fail_employees = False

    def get_employees(self, *, limit=1000, status="active"):
        if self.fail_employees:
            raise ApiError("Failed to fetch employees", status_code=500)
        return [Employee(7, "EMP007", "Asha Rao")]

    def get_holidays(self, year):
        return []

    def get_attendance(self, month_key):
        return AttendanceSummaryResponse()

    def get_computed_attendance(self, start_date, end_date):
        return []

    def save_attendance(self, records, month_key):
        self.saved.append(month_key)
        return SaveResult(successCount=len(records))

    def get_projects(self):
        return [ProjectRecord(id=1, project_id="P-1", name="Website", status="planning")]

    def update_project_status(self, project_id, status):
        self.status_updates.append((project_id, status))
        return {"success": True}


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def app(monkeypatch, api):
    monkeypatch.setenv("APP_ENV", "testing")
    container = build_container(api=api, today=lambda: date(2024, 2, 15))
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


def test_grid_for_requested_month(client):
    resp = client.get("/attendance?month=2024-02")

    assert resp.status_code == 200
    grid = resp.get_json()["grid"]
    assert grid["month"] == "2024-02"
    assert grid["label"] == "February 2024"
    assert len(grid["days"]) == 29
    assert grid["employees"][0]["present"] == 23
    assert grid["employees"][0]["cells"]["2024-02-04"]["fullLabel"] == "Weekly Off"
    assert grid["employees"][0]["totalHours"] == 195.5


def test_mark_then_save(client):
    client.get("/attendance?month=2024-02")

    resp = client.post(
        "/attendance/mark",
        json={"employee_id": 7, "start_date": "2024-02-05", "attendance_type": "P", "out_time": "19:00"},
    )
    body = resp.get_json()
    assert body["success"] is True
    assert body["grid"]["employees"][0]["overtime"] == 1.5

    resp = client.post("/attendance/save")
    assert resp.get_json() == {"success": True, "message": "Saved successfully! 29 records updated."}


def test_invalid_input_is_400(client):
    client.get("/attendance?month=2024-02")

    resp = client.post("/attendance/mark", json={"employee_id": 7, "start_date": "2024-02-05", "attendance_type": "ZZ"})
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False

    assert client.get("/attendance?month=2024-13").status_code == 400


def test_navigate_and_export(client):
    client.get("/attendance?month=2024-02")

    resp = client.post("/attendance/navigate", json={"direction": "next"})
    assert resp.get_json()["grid"]["month"] == "2024-03"

    resp = client.get("/attendance/export.csv")
    assert resp.mimetype == "text/csv"
    header = resp.data.decode("utf-8-sig").splitlines()[0]
    assert header.startswith("employee_code,name,2024-03-01")
    assert header.endswith("weekly_off,holiday,total_hours")


def test_board_drop(client):
    resp = client.get("/projects/board")
    columns = {c["id"]: c["cards"] for c in resp.get_json()["board"]["columns"]}
    assert [c["key"] for c in columns["planning"]] == ["P-1"]

    resp = client.post("/projects/board/drop", json={"key": "P-1", "dest": "completed"})
    body = resp.get_json()
    assert body["success"] is True
    columns = {c["id"]: c["cards"] for c in body["board"]["columns"]}
    assert columns["completed"][0]["status"] == "completed"

    assert client.post("/projects/board/drop", json={"key": "P-1", "dest": "nowhere"}).status_code == 400


def test_grid_retries_after_roster_failure(api, client):
    api.fail_employees = True

    body = client.get("/attendance?month=2024-02").get_json()
    assert body["success"] is False
    assert body["message"] == "Failed to fetch employees"
    assert body["grid"]["employees"] == []

    api.fail_employees = False
    body = client.get("/attendance").get_json()
    assert body["success"] is True
    assert body["grid"]["month"] == "2024-02"
    assert body["grid"]["error"] is None
    assert len(body["grid"]["employees"]) == 1


def test_api_error_escaping_a_view_is_502(app):
    @app.route("/crm-down")
    def crm_down():
        raise ApiError("CRM unavailable", status_code=503)

    resp = app.test_client().get("/crm-down")

    assert resp.status_code == 502
    assert resp.get_json() == {"success": False, "message": "CRM unavailable"}
