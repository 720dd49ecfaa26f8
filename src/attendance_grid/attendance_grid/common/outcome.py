from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Outcome:
    """Result of a user action: success flag plus the banner text to show."""

    ok: bool
    message: str = ""

    def to_dict(self) -> dict:
        return {"success": self.ok, "message": self.message}
