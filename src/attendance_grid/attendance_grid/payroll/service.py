from __future__ import annotations

import logging
from typing import Iterable, Optional, Protocol

from ..api.schemas import PayrollGenerationResponse
from ..common.datetime_utils import parse_month_key
from ..common.outcome import Outcome
from ..core.exceptions import ApiError

logger = logging.getLogger(__name__)


class PayrollApi(Protocol):
    def generate_payroll(self, body: dict) -> PayrollGenerationResponse:
        raise NotImplementedError


def generation_request(month: str, employee_ids: Iterable[int] = ()) -> dict:
    """Body for /api/payroll/generate. No employees selected means everyone."""
    parse_month_key(month)
    ids = [int(i) for i in employee_ids]
    body: dict = {"month": f"{month}-01"}
    if not ids:
        body["all"] = True
    elif len(ids) == 1:
        body["employee_id"] = ids[0]
    else:
        body["employee_ids"] = ids
    return body


def format_generation_message(response: PayrollGenerationResponse) -> str:
    """Fold per-item counts and errors into one alert text."""
    results = response.results
    # Single-employee generation answers without a results block.
    success = results.success if results else 1
    message = f"Salary Slip generated successfully! Success: {success}"
    if results is None:
        return message
    if results.failed > 0:
        message += f", Failed: {results.failed}"
    if results.skipped > 0:
        message += f", Skipped (already exists): {results.skipped}"
    if results.errors:
        message += "\n\nErrors:\n" + "\n".join(f"- Employee {e.employee_id}: {e.error}" for e in results.errors)
    return message


class PayrollGenerationService:
    def __init__(self, api: PayrollApi):
        self._api = api

    def generate(self, month: str, employee_ids: Optional[Iterable[int]] = None) -> Outcome:
        body = generation_request(month, employee_ids or ())
        try:
            response = self._api.generate_payroll(body)
        except ApiError as e:
            logger.error("Payroll generation for %s failed: %s", month, e)
            return Outcome(False, str(e) or "Failed to generate Salary Slip")
        return Outcome(True, format_generation_message(response))
