from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import BoardColumn


@dataclass(frozen=True)
class Project:
    """Card on the board; ``status`` is the authoritative lane."""

    project_id: int
    key: str
    name: str
    status: BoardColumn
    client_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.project_id,
            "key": self.key,
            "name": self.name,
            "status": self.status.value,
            "client_name": self.client_name,
        }


def column_for(status: Optional[str]) -> BoardColumn:
    """Loose backend status text -> lane. Anything unrecognised starts in planning."""
    text = (status or "").strip().lower().replace("_", "-").replace(" ", "-")
    for column in BoardColumn:
        if text == column.value:
            return column
    if "progress" in text:
        return BoardColumn.IN_PROGRESS
    if "complete" in text:
        return BoardColumn.COMPLETED
    if "hold" in text:
        return BoardColumn.ON_HOLD
    return BoardColumn.PLANNING
