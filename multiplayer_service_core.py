from __future__ import annotations

import re

from game_errors import SessionNotFound, UnknownPlayer
from prompt_formats import Session
from session_store import CODE_MAX, CODE_MIN, SessionStore


class MultiplayerServiceCore:
    """Shared room/session plumbing for in-memory multiplayer game services."""

    STALE_SESSION_SECONDS = 0

    def __init__(self, *, store: SessionStore, stale_session_seconds: float | None = None):
        self.store = store
        if stale_session_seconds is not None:
            self.stale_session_seconds = float(stale_session_seconds)
        else:
            self.stale_session_seconds = float(self.STALE_SESSION_SECONDS)

    def _cleanup_stale_sessions(self) -> None:
        if self.stale_session_seconds <= 0:
            return
        self.store.prune_stale(self.stale_session_seconds)

    def _require_session(self, code) -> Session:
        """Look up a session. Callers mutating it must hold ``self.store.lock``."""
        normalized = self._normalize_code(code)
        session = self.store.get(normalized) if normalized is not None else None
        if session is None:
            raise SessionNotFound(f"Game with group code {code} does not exist.")
        return session

    @staticmethod
    def _require_player(session: Session, username: str) -> None:
        if username not in session.players:
            raise UnknownPlayer("Invalid username for this game.")

    @staticmethod
    def _normalize_code(code) -> int | None:
        if isinstance(code, bool) or code is None:
            return None
        if isinstance(code, int):
            value = code
        else:
            digits = str(code).strip()
            if not re.fullmatch(r"\d{1,6}", digits):
                return None
            value = int(digits)
        if not CODE_MIN <= value < CODE_MAX:
            return None
        return value

