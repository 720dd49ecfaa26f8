from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional, Protocol

from ..api.schemas import ProjectRecord
from ..common.outcome import Outcome
from ..core.enums import BoardColumn, DropPosition
from ..core.exceptions import ApiError
from .board import BoardState, build_board, drag_start, insertion_position, move, reorder, revert_status
from .model import Project, column_for

logger = logging.getLogger(__name__)


class ProjectsApi(Protocol):
    def get_projects(self) -> list[ProjectRecord]:
        raise NotImplementedError

    def update_project_status(self, project_id, status: str) -> dict:
        raise NotImplementedError


@dataclass(frozen=True)
class DropOutcome:
    ok: bool
    board: BoardState
    alert: Optional[str] = None


class BoardService:
    def __init__(self, api: ProjectsApi):
        self._api = api
        self._lock = threading.Lock()
        self._board = BoardState()

    @property
    def board(self) -> BoardState:
        return self._board

    def load(self) -> Outcome:
        try:
            records = self._api.get_projects()
        except ApiError as e:
            logger.error("Loading projects failed: %s", e)
            return Outcome(False, str(e))

        projects = [
            Project(
                project_id=r.id,
                key=r.project_id or str(r.id),
                name=r.name or "",
                status=column_for(r.status),
                client_name=r.client_name,
            )
            for r in records
        ]
        with self._lock:
            self._board = build_board(projects)
        return Outcome(True)

    def drag_start(self, key: str) -> BoardState:
        with self._lock:
            self._board = drag_start(self._board, key)
            return self._board

    def drop(
        self,
        key: str,
        dest: BoardColumn,
        target_key: Optional[str] = None,
        position: DropPosition = DropPosition.AFTER,
        *,
        pointer_y: Optional[float] = None,
        card_top: Optional[float] = None,
        card_height: Optional[float] = None,
    ) -> DropOutcome:
        dest = BoardColumn(dest)
        if pointer_y is not None and card_top is not None and card_height is not None:
            position = insertion_position(pointer_y, card_top, card_height)

        with self._lock:
            board = self._board
            source = board.column_of(key)
            if source == dest:
                self._board = reorder(board, key, target_key, position)
                return DropOutcome(True, self._board)
            project = board.projects.get(key)
            self._board = move(board, key, dest, target_key, position)
        previous = project.status

        try:
            self._api.update_project_status(project.project_id, dest.value)
        except ApiError as e:
            logger.error("Moving project %s to %s failed: %s", key, dest.value, e)
            with self._lock:
                self._board = revert_status(self._board, key, previous)
                board = self._board
            return DropOutcome(False, board, alert=f"Failed to update project status: {e}")
        return DropOutcome(True, self._board)
