"""Request bodies for each game operation, validated before reaching the service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from game_errors import InvalidRequest, MissingParameter


@dataclass(frozen=True)
class CreateSessionRequest:
    code: int
    capacity: int
    prompt_count: int


@dataclass(frozen=True)
class JoinSessionRequest:
    code: Any
    username: str


@dataclass(frozen=True)
class PromptsRequest:
    solo: bool
    code: Any = None
    prompt_count: int | None = None


@dataclass(frozen=True)
class SimilarityJudgment:
    item_types: tuple
    similarity: float


@dataclass(frozen=True)
class SubmitSimilaritiesRequest:
    code: Any
    username: str
    similarities: list[SimilarityJudgment]


def _first_present(data: dict, *keys: str):
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


def _coerce_int(value, field_name: str, *, minimum: int = 1) -> int:
    if isinstance(value, bool):
        raise InvalidRequest(f"{field_name} must be an integer.")
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        value = int(value.strip())
    if not isinstance(value, int):
        raise InvalidRequest(f"{field_name} must be an integer.")
    if value < minimum:
        raise InvalidRequest(f"{field_name} must be at least {minimum}.")
    return value


def _require_mapping(data) -> dict:
    if not isinstance(data, dict):
        raise InvalidRequest("Request body must be a JSON object.")
    return data


def parse_create_session(data) -> CreateSessionRequest:
    data = _require_mapping(data)
    code = _first_present(data, "code")
    capacity = _first_present(data, "capacity", "num_players", "numPlayers")
    prompt_count = _first_present(data, "prompt_count", "num_prompts", "numQs")
    # Zero counts as absent for these fields.
    if not code or not capacity or not prompt_count:
        raise InvalidRequest("Malformed request.")
    return CreateSessionRequest(
        code=_coerce_int(code, "code"),
        capacity=_coerce_int(capacity, "capacity"),
        prompt_count=_coerce_int(prompt_count, "prompt_count"),
    )


def parse_join_session(code, data) -> JoinSessionRequest:
    data = _require_mapping(data)
    username = data.get("username")
    if code is None or code == "" or username is None or str(username).strip() == "":
        raise MissingParameter("Missing parameters.")
    return JoinSessionRequest(code=code, username=str(username))


def parse_request_prompts(data) -> PromptsRequest:
    data = _require_mapping(data)
    solo = data.get("solo")
    if solo is None:
        raise MissingParameter("Missing parameters.")
    if not isinstance(solo, bool):
        raise InvalidRequest("solo must be a boolean.")

    if solo:
        prompt_count = _first_present(data, "prompt_count", "num_prompts", "numQs")
        if not prompt_count:
            raise MissingParameter("Missing parameters.")
        return PromptsRequest(
            solo=True, prompt_count=_coerce_int(prompt_count, "prompt_count")
        )

    code = _first_present(data, "code")
    if not code:
        raise MissingParameter("Missing parameters.")
    return PromptsRequest(solo=False, code=code)


def parse_submit_similarities(data) -> SubmitSimilaritiesRequest:
    data = _require_mapping(data)
    code = data.get("code")
    username = data.get("username")
    similarities = data.get("similarities")
    if not code or not username or similarities is None:
        raise MissingParameter("Missing parameters.")
    if not isinstance(similarities, list):
        raise InvalidRequest("similarities must be a list.")
    return SubmitSimilaritiesRequest(
        code=code,
        username=str(username),
        similarities=[_parse_judgment(entry, index) for index, entry in enumerate(similarities)],
    )


def _parse_judgment(entry, index: int) -> SimilarityJudgment:
    """Accept ``{"items": [a, b], "similarity": s}`` or the list form ``[a, b, [{"similarity": s}]]``."""
    if isinstance(entry, dict):
        items = entry.get("items")
        similarity = entry.get("similarity")
    elif isinstance(entry, list) and len(entry) == 3:
        items = entry[:2]
        scores = entry[2]
        similarity = None
        if isinstance(scores, list) and scores and isinstance(scores[0], dict):
            similarity = scores[0].get("similarity")
    else:
        raise InvalidRequest(f"similarities[{index}] is malformed.")

    if not isinstance(items, list) or len(items) != 2:
        raise InvalidRequest(f"similarities[{index}] must carry exactly two items.")
    if isinstance(similarity, bool) or not isinstance(similarity, (int, float)):
        raise InvalidRequest(f"similarities[{index}] is missing a numeric similarity.")

    item_types = tuple(
        item.get("type") if isinstance(item, dict) else None for item in items
    )
    return SimilarityJudgment(item_types=item_types, similarity=similarity)
