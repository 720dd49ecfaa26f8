from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.enums import BoardColumn, DropPosition
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.board_service

    @app.route("/projects/board", methods=["GET"], endpoint="projects_board")
    def projects_board():
        outcome = None
        if request.args.get("refresh") or not service.board.projects:
            outcome = service.load()
        body = {"board": service.board.to_dict(), "success": True}
        if outcome is not None:
            body.update(outcome.to_dict())
        return jsonify(body), 200

    @app.route("/projects/board/drag-start", methods=["POST"], endpoint="projects_drag_start")
    def projects_drag_start():
        data = request.get_json(silent=True) or {}
        board = service.drag_start(str(data.get("key") or ""))
        return jsonify({"success": True, "board": board.to_dict()}), 200

    @app.route("/projects/board/drop", methods=["POST"], endpoint="projects_drop")
    def projects_drop():
        data = request.get_json(silent=True) or {}
        try:
            dest = BoardColumn(data.get("dest"))
            position = DropPosition(data.get("position") or DropPosition.AFTER.value)
        except ValueError as e:
            raise ValidationError("Unknown column or drop position") from e

        result = service.drop(
            str(data.get("key") or ""),
            dest,
            data.get("target_key"),
            position,
            pointer_y=data.get("pointer_y"),
            card_top=data.get("card_top"),
            card_height=data.get("card_height"),
        )
        return jsonify({"success": result.ok, "alert": result.alert, "board": result.board.to_dict()}), 200
