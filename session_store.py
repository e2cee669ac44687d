"""In-memory session table and group-code allocator."""

from __future__ import annotations

import logging
import random
import threading
import time

from prompt_formats import Session

logger = logging.getLogger(__name__)

CODE_MIN = 1000
CODE_MAX = 9999  # exclusive


class SessionStore:
    """Process-wide table of live sessions keyed by group code.

    Every read-modify-write on a session (roster, prompts, completion) must run
    inside ``with store.lock``. Upstream I/O must not.
    """

    def __init__(self, rng: random.Random | None = None):
        self.lock = threading.RLock()
        self._rng = rng or random.Random()
        self._sessions: dict[int, Session] = {}
        self._reserved_codes: set[int] = set()

    def allocate_code(self) -> int:
        with self.lock:
            while True:
                code = self._rng.randrange(CODE_MIN, CODE_MAX)
                if code not in self._reserved_codes:
                    break
            self._reserved_codes.add(code)
        logger.info("Allocated group code %s (%s reserved)", code, len(self._reserved_codes))
        return code

    def is_reserved(self, code: int) -> bool:
        with self.lock:
            return code in self._reserved_codes

    def put(self, session: Session) -> Session | None:
        """Store ``session`` under its code and return whatever it replaced."""
        with self.lock:
            previous = self._sessions.get(session.code)
            self._sessions[session.code] = session
            self._reserved_codes.add(session.code)
            return previous

    def get(self, code: int) -> Session | None:
        with self.lock:
            return self._sessions.get(code)

    def __len__(self) -> int:
        with self.lock:
            return len(self._sessions)

    def __contains__(self, code) -> bool:
        with self.lock:
            return code in self._sessions

    def snapshot(self) -> dict[str, dict]:
        with self.lock:
            return {
                str(code): session.to_dict()
                for code, session in sorted(self._sessions.items())
            }

    def prune_stale(self, max_age_seconds: float) -> list[int]:
        """Drop sessions idle for longer than ``max_age_seconds`` and free their codes."""
        if max_age_seconds <= 0:
            return []
        cutoff = time.time() - max_age_seconds
        with self.lock:
            stale = [
                code
                for code, session in self._sessions.items()
                if session.updated_at < cutoff and not session.generating
            ]
            for code in stale:
                del self._sessions[code]
                self._reserved_codes.discard(code)
        if stale:
            logger.info("Pruned %s stale session(s): %s", len(stale), stale)
        return stale

    def reset(self) -> None:
        with self.lock:
            self._sessions.clear()
            self._reserved_codes.clear()
