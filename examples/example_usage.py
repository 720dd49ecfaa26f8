"""Example: drive the attendance grid through the service layer (no Flask).

Controllers are a thin layer; the grid logic lives in the services.
"""

import importlib

from config import get_settings_module

from src.attendance_grid.attendance_grid.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(api_config=settings.API_CONFIG)
    service = container.attendance_service

    outcome = service.current_month()
    print(outcome.message or ("loaded" if outcome.ok else "failed"))
    print(service.summary_stats())


if __name__ == "__main__":
    main()
