from __future__ import annotations

import re

from ..core.exceptions import ValidationError

_HHMM = re.compile(r"^([01]?\d|2[0-3]):[0-5]\d$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def optional_hhmm(value, field_name: str):
    """Accept None/'' or an HH:MM time string."""
    if value is None or value == "":
        return None
    value = str(value).strip()
    if not _HHMM.match(value):
        raise ValidationError(f"{field_name} must be HH:MM")
    return value
