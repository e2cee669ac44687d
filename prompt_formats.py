import threading
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

PICTURE = "picture"
QUOTE = "quote"
CATEGORIES = (PICTURE, QUOTE)


@dataclass
class ImageCandidate:
    url: str


@dataclass
class QuoteCandidate:
    author: str
    body: str


@dataclass
class PromptItem:
    """One side of a prompt pair. ``type`` is None for an unfilled slot."""

    type: Optional[str] = None
    url: str = ""
    author: str = ""
    text: str = ""

    @classmethod
    def picture(cls, url: str) -> "PromptItem":
        return cls(type=PICTURE, url=url)

    @classmethod
    def quote(cls, author: str, text: str) -> "PromptItem":
        return cls(type=QUOTE, author=author, text=text)

    @property
    def is_filled(self) -> bool:
        return self.type is not None

    def to_dict(self) -> dict:
        if self.type == PICTURE:
            return {"type": PICTURE, "url": self.url}
        if self.type == QUOTE:
            return {"type": QUOTE, "author": self.author, "quote": self.text}
        return {}


@dataclass
class SimilaritySubmission:
    username: str
    similarity: float

    def to_dict(self) -> dict:
        return {"username": self.username, "similarity": self.similarity}


@dataclass
class PromptPair:
    items: List[PromptItem]
    submissions: List[SimilaritySubmission] = field(default_factory=list)

    @property
    def item_types(self):
        return tuple(item.type for item in self.items)

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.items],
            "submissions": [s.to_dict() for s in self.submissions],
        }


@dataclass
class Session:
    code: int
    capacity: int
    requested_prompt_count: int
    players: List[str] = field(default_factory=list)
    completed_count: int = 0
    completed_players: Set[str] = field(default_factory=set)
    prompts: Optional[List[PromptPair]] = None
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)

    # Generation handoff between the generating request and waiters.
    generating: bool = field(default=False, repr=False, compare=False)
    prompts_ready: threading.Event = field(
        default_factory=threading.Event, repr=False, compare=False
    )

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.capacity

    @property
    def is_complete(self) -> bool:
        return self.completed_count >= self.capacity

    def touch(self) -> None:
        self.updated_at = time.time()

    def to_dict(self) -> Dict[str, object]:
        return {
            "code": self.code,
            "users": list(self.players),
            "num_players": self.capacity,
            "num_complete": self.completed_count,
            "num_prompts": self.requested_prompt_count,
            "prompts": prompts_to_list(self.prompts),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


def prompts_to_list(prompts: Optional[List[PromptPair]]):
    if prompts is None:
        return None
    return [pair.to_dict() for pair in prompts]
