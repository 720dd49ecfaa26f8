from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Optional

from .api.client import ApiConfig, CrmApiClient
from .attendance.bridge import AttendanceBridge
from .attendance.service import AttendanceGridService
from .common.datetime_utils import today_local
from .core.constants import DEFAULT_EMPLOYEE_FETCH_LIMIT, DEFAULT_REQUEST_TIMEOUT
from .payroll.service import PayrollGenerationService
from .projects.service import BoardService


@dataclass(frozen=True)
class Container:
    api: Any

    attendance_bridge: AttendanceBridge
    attendance_service: AttendanceGridService
    board_service: BoardService
    payroll_service: PayrollGenerationService


def build_container(
    *,
    api_config: Optional[dict] = None,
    api: Any = None,
    employee_limit: int = DEFAULT_EMPLOYEE_FETCH_LIMIT,
    today: Callable[[], date] = today_local,
) -> Container:
    """Wire services around one API client. Pass ``api`` to substitute a fake."""
    if api is None:
        if not api_config:
            raise ValueError("api_config or api is required")
        api = CrmApiClient(
            ApiConfig(
                base_url=str(api_config["base_url"]),
                token=api_config.get("token"),
                timeout=int(api_config.get("timeout", DEFAULT_REQUEST_TIMEOUT)),
            )
        )

    attendance_bridge = AttendanceBridge(api)
    attendance_service = AttendanceGridService(
        api, bridge=attendance_bridge, employee_limit=employee_limit, today=today
    )
    board_service = BoardService(api)
    payroll_service = PayrollGenerationService(api)

    return Container(
        api=api,
        attendance_bridge=attendance_bridge,
        attendance_service=attendance_service,
        board_service=board_service,
        payroll_service=payroll_service,
    )
