from __future__ import annotations

from typing import Any

from flask import jsonify

from game_errors import GameError


def build_error_payload(
    *,
    code: str,
    message: str,
    details: Any = None,
) -> dict[str, Any]:
    payload = {
        "code": str(code).strip() or "unknown_error",
        "message": str(message).strip() or "Unknown error.",
        "details": details if details is not None else {},
    }
    # Backward-compatible alias for clients that still read "error".
    payload["error"] = payload["message"]
    return payload


def error_response(
    *,
    status: int,
    code: str,
    message: str,
    details: Any = None,
):
    return jsonify(build_error_payload(code=code, message=message, details=details)), int(
        status
    )


def game_error_response(exc: GameError):
    return error_response(
        status=exc.status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details,
    )
