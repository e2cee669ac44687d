from __future__ import annotations


class GameError(Exception):
    code = "game_error"
    default_status = 400

    def __init__(self, message: str, status_code: int | None = None, details=None):
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code or self.default_status)
        self.details = details


class MissingParameter(GameError):
    code = "missing_parameter"
    default_status = 400


class InvalidRequest(GameError):
    code = "invalid_request"
    default_status = 406


class SessionNotFound(GameError):
    code = "session_not_found"
    default_status = 404


class SessionFull(GameError):
    code = "session_full"
    default_status = 409


class DuplicateUser(GameError):
    code = "duplicate_user"
    default_status = 409


class UnknownPlayer(GameError):
    code = "unknown_player"
    default_status = 404


class AlreadyComplete(GameError):
    code = "already_complete"
    default_status = 409


class UpstreamError(GameError):
    code = "upstream_error"
    default_status = 502


class UpstreamTimeout(UpstreamError):
    code = "upstream_timeout"
    default_status = 504


class GenerationTimeout(GameError):
    code = "generation_timeout"
    default_status = 504
