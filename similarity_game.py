from __future__ import annotations

import logging
import random
import time
from concurrent.futures import ThreadPoolExecutor

from game_errors import (
    AlreadyComplete,
    DuplicateUser,
    GenerationTimeout,
    InvalidRequest,
    MissingParameter,
    SessionFull,
)
from multiplayer_service_core import MultiplayerServiceCore
from prompt_formats import PromptPair, Session, SimilaritySubmission, prompts_to_list
from prompt_generator import QUOTE_PAIRING_SPLIT, generate_prompts
from request_schemas import SimilarityJudgment
from session_store import CODE_MAX, CODE_MIN, SessionStore

logger = logging.getLogger(__name__)


class SimilarityGameService(MultiplayerServiceCore):
    DEFAULT_GENERATION_TIMEOUT_SECONDS = 30.0

    def __init__(
        self,
        *,
        store: SessionStore,
        fetcher,
        generation_timeout: float = DEFAULT_GENERATION_TIMEOUT_SECONDS,
        quote_pairing: str = QUOTE_PAIRING_SPLIT,
        stale_session_seconds: float | None = None,
        rng: random.Random | None = None,
    ):
        super().__init__(store=store, stale_session_seconds=stale_session_seconds)
        self.fetcher = fetcher
        self.generation_timeout = float(generation_timeout)
        self.quote_pairing = quote_pairing
        self._rng = rng or random.Random()

    # ------------------------
    # Lobby
    # ------------------------

    def allocate_group_code(self) -> dict:
        self._cleanup_stale_sessions()
        return {"code": self.store.allocate_code()}

    def create_session(self, code: int, capacity: int, prompt_count: int) -> dict:
        if code is None or capacity is None or prompt_count is None:
            raise InvalidRequest("Malformed request.")
        if not CODE_MIN <= code < CODE_MAX:
            raise InvalidRequest(f"Group code must be between {CODE_MIN} and {CODE_MAX - 1}.")
        if capacity < 1 or prompt_count < 1:
            raise InvalidRequest("Player and prompt counts must be positive.")

        self._cleanup_stale_sessions()
        session = Session(code=code, capacity=capacity, requested_prompt_count=prompt_count)
        with self.store.lock:
            previous = self.store.put(session)
            payload = session.to_dict()
        if previous is not None:
            logger.warning("Group code %s already had a session; replaced it.", code)
        logger.info(
            "Created session %s (players=%s, prompts=%s)", code, capacity, prompt_count
        )
        return payload

    def join_session(self, code, username: str) -> dict:
        if username is None or not str(username).strip():
            raise MissingParameter("Missing parameters.")

        self._cleanup_stale_sessions()
        with self.store.lock:
            session = self._require_session(code)
            if session.is_full:
                raise SessionFull(
                    "Group has reached maximum players.",
                    details={"error_type": "game"},
                )
            if username in session.players:
                raise DuplicateUser(
                    "User already exists with this name.",
                    details={"error_type": "user"},
                )
            session.players.append(username)
            session.touch()
            payload = session.to_dict()
        logger.info(
            "%s joined session %s (%s/%s)",
            username,
            session.code,
            len(payload["users"]),
            session.capacity,
        )
        return payload

    def get_player_count(self, code) -> dict:
        with self.store.lock:
            session = self._require_session(code)
            return {"current": len(session.players), "total": session.capacity}

    def get_completion_count(self, code) -> dict:
        with self.store.lock:
            session = self._require_session(code)
            return {"completed": session.completed_count, "total": session.capacity}

    # ------------------------
    # Prompts
    # ------------------------

    def request_prompts(self, code=None, solo: bool = False, prompt_count: int | None = None):
        if solo:
            if not prompt_count:
                raise MissingParameter("Missing parameters.")
            logger.info("Generating %s solo prompt(s)", prompt_count)
            return prompts_to_list(self._build_prompts(prompt_count))

        if code is None:
            raise MissingParameter("Missing parameters.")
        session = self._require_session(code)
        deadline = time.monotonic() + self.generation_timeout

        while True:
            with self.store.lock:
                if session.prompts is not None:
                    return prompts_to_list(session.prompts)
                if not session.generating:
                    session.generating = True
                    session.prompts_ready.clear()
                    break
                ready = session.prompts_ready

            remaining = deadline - time.monotonic()
            if remaining <= 0 or not ready.wait(remaining):
                raise GenerationTimeout(
                    f"Prompts for group {session.code} were not ready in time."
                )

        logger.info(
            "Generating %s prompt(s) for session %s",
            session.requested_prompt_count,
            session.code,
        )
        try:
            prompts = self._build_prompts(session.requested_prompt_count)
        except Exception:
            logger.warning("Prompt generation failed for session %s", session.code)
            with self.store.lock:
                session.generating = False
                session.prompts_ready.set()
            raise

        with self.store.lock:
            if self.store.get(session.code) is not session:
                logger.warning(
                    "Session %s was replaced during prompt generation; "
                    "prompts were not stored on the live session.",
                    session.code,
                )
            session.prompts = prompts
            session.generating = False
            session.touch()
            session.prompts_ready.set()
            return prompts_to_list(session.prompts)

    def get_prompts(self, code):
        with self.store.lock:
            session = self._require_session(code)
            return prompts_to_list(session.prompts)

    def _build_prompts(self, count: int) -> list[PromptPair]:
        images, quotes = self._fetch_content()
        return generate_prompts(
            count,
            images,
            quotes,
            rng=self._rng,
            quote_pairing=self.quote_pairing,
        )

    def _fetch_content(self):
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="prompt-fetch") as pool:
            images = pool.submit(self.fetcher.fetch_images)
            quotes = pool.submit(self.fetcher.fetch_quotes)
            return images.result(), quotes.result()

    # ------------------------
    # Similarities
    # ------------------------

    def submit_similarities(
        self, code, username: str, similarities: list[SimilarityJudgment]
    ) -> None:
        if code is None or not username or similarities is None:
            raise MissingParameter("Missing parameters.")

        with self.store.lock:
            session = self._require_session(code)
            if session.is_complete:
                raise AlreadyComplete(
                    f"All players in group {session.code} have already submitted."
                )
            self._require_player(session, username)
            if username in session.completed_players:
                raise AlreadyComplete(f"{username} has already submitted.")
            if session.prompts is None:
                raise InvalidRequest("Prompts have not been generated for this game yet.")

            recorded = 0
            for pair, judgment in zip(session.prompts, reversed(similarities)):
                if judgment.item_types != pair.item_types:
                    continue
                pair.submissions.append(
                    SimilaritySubmission(username=username, similarity=judgment.similarity)
                )
                recorded += 1

            session.completed_players.add(username)
            session.completed_count += 1
            session.touch()
            completed, total = session.completed_count, session.capacity

        logger.info(
            "%s submitted %s/%s similarities to session %s (%s/%s done)",
            username,
            recorded,
            len(similarities),
            session.code,
            completed,
            total,
        )

    # ------------------------
    # Diagnostics
    # ------------------------

    def dump_sessions(self) -> dict:
        return self.store.snapshot()
