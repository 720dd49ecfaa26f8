from src.attendance_grid.attendance_grid.api.schemas import PayrollGenerationResponse
from src.attendance_grid.attendance_grid.core.exceptions import ApiError
from src.attendance_grid.attendance_grid.payroll.service import (
    PayrollGenerationService,
    format_generation_message,
    generation_request,
)


def test_generation_request_shapes():
    assert generation_request("2024-02") == {"month": "2024-02-01", "all": True}
    assert generation_request("2024-02", ["5"]) == {"month": "2024-02-01", "employee_id": 5}
    assert generation_request("2024-02", [5, 6]) == {"month": "2024-02-01", "employee_ids": [5, 6]}


def test_message_folds_counts_and_errors():
    response = PayrollGenerationResponse.model_validate(
        {
            "success": True,
            "results": {
                "success": 8,
                "failed": 1,
                "skipped": 2,
                "errors": [{"employee_id": 14, "error": "No salary structure"}],
            },
        }
    )

    assert format_generation_message(response) == (
        "Salary Slip generated successfully! Success: 8, Failed: 1, Skipped (already exists): 2"
        "\n\nErrors:\n- Employee 14: No salary structure"
    )


def test_message_without_results_block():
    response = PayrollGenerationResponse.model_validate({"success": True})

    assert format_generation_message(response) == "Salary Slip generated successfully! Success: 1"


class FakePayrollApi:
    def __init__(self, error=None):
        self.error = error
        self.bodies = []

    def generate_payroll(self, body):
        self.bodies.append(body)
        if self.error:
            raise self.error
        return PayrollGenerationResponse.model_validate({"success": True, "results": {"success": 3}})


def test_service_returns_alert_text():
    api = FakePayrollApi()

    outcome = PayrollGenerationService(api).generate("2024-02")

    assert outcome.ok
    assert outcome.message == "Salary Slip generated successfully! Success: 3"
    assert api.bodies == [{"month": "2024-02-01", "all": True}]


def test_service_failure():
    outcome = PayrollGenerationService(FakePayrollApi(ApiError("Payroll locked"))).generate("2024-02", [1])

    assert not outcome.ok
    assert outcome.message == "Payroll locked"
