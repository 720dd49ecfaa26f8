"""Kanban ordering.

``order`` only drives rendering; a project's lane of record is its
``status``. All transforms return a new :class:`BoardState`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Mapping, Optional

from ..core.enums import BoardColumn, DropPosition
from ..core.exceptions import ValidationError
from .model import Project


@dataclass(frozen=True)
class BoardState:
    order: Mapping[BoardColumn, tuple[str, ...]] = field(default_factory=dict)
    projects: Mapping[str, Project] = field(default_factory=dict)
    dragging: Optional[str] = None

    def column_of(self, key: str) -> Optional[BoardColumn]:
        for column, keys in self.order.items():
            if key in keys:
                return column
        return None

    def to_dict(self) -> dict:
        return {
            "dragging": self.dragging,
            "columns": [
                {"id": column.value, "cards": [self.projects[k].to_dict() for k in self.order.get(column, ())]}
                for column in BoardColumn
            ],
        }


def build_board(projects: Iterable[Project]) -> BoardState:
    order: dict[BoardColumn, list[str]] = {column: [] for column in BoardColumn}
    by_key: dict[str, Project] = {}
    for project in projects:
        by_key[project.key] = project
        order[project.status].append(project.key)
    return BoardState(order={c: tuple(keys) for c, keys in order.items()}, projects=by_key)


def drag_start(board: BoardState, key: str) -> BoardState:
    _require(board, key)
    return replace(board, dragging=key)


def drag_end(board: BoardState) -> BoardState:
    return replace(board, dragging=None)


def insertion_position(pointer_y: float, top: float, height: float) -> DropPosition:
    """Drop above the card when the pointer is over its upper half."""
    return DropPosition.AFTER if pointer_y > top + height / 2 else DropPosition.BEFORE


def reorder(
    board: BoardState,
    key: str,
    target_key: Optional[str],
    position: DropPosition = DropPosition.AFTER,
) -> BoardState:
    """Same-lane reorder. Local only, nothing about order is persisted."""
    column = _require(board, key)
    if target_key == key:
        return drag_end(board)
    keys = [k for k in board.order[column] if k != key]
    order = dict(board.order)
    order[column] = _insert(keys, key, target_key, position)
    return replace(board, order=order, dragging=None)


def move(
    board: BoardState,
    key: str,
    dest: BoardColumn,
    target_key: Optional[str] = None,
    position: DropPosition = DropPosition.AFTER,
) -> BoardState:
    """Cross-lane move; also sets the card's local ``status`` to ``dest``."""
    source = _require(board, key)
    dest = BoardColumn(dest)
    if source == dest:
        return reorder(board, key, target_key, position)

    order = dict(board.order)
    order[source] = tuple(k for k in order[source] if k != key)
    order[dest] = _insert(list(order.get(dest, ())), key, target_key, position)

    projects = dict(board.projects)
    projects[key] = replace(projects[key], status=dest)
    return BoardState(order=order, projects=projects, dragging=None)


def revert_status(board: BoardState, key: str, status: BoardColumn) -> BoardState:
    """Restore a card's ``status``; lane membership is left as is."""
    _require(board, key)
    projects = dict(board.projects)
    projects[key] = replace(projects[key], status=BoardColumn(status))
    return replace(board, projects=projects)


def _insert(keys: list[str], key: str, target_key: Optional[str], position: DropPosition) -> tuple[str, ...]:
    if target_key is None or target_key not in keys:
        keys.append(key)
    else:
        index = keys.index(target_key)
        keys.insert(index + 1 if DropPosition(position) == DropPosition.AFTER else index, key)
    return tuple(keys)


def _require(board: BoardState, key: str) -> BoardColumn:
    column = board.column_of(key)
    if key not in board.projects or column is None:
        raise ValidationError(f"Unknown project: {key}")
    return column
