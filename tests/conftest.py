import sys
import threading
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app import create_app
from app_services import AppServiceConfig, AppServices
from prompt_formats import ImageCandidate, QuoteCandidate
from session_store import SessionStore
from similarity_game import SimilarityGameService


class StubFetcher:
    """Stands in for the upstream providers and counts how often it is hit."""

    def __init__(self, num_images=10, num_quotes=10, fail_with=None, gate=None):
        self.num_images = num_images
        self.num_quotes = num_quotes
        self.fail_with = fail_with
        self.gate = gate
        self.image_calls = 0
        self.quote_calls = 0
        self._lock = threading.Lock()

    def fetch_images(self):
        with self._lock:
            self.image_calls += 1
        if self.gate is not None:
            self.gate.wait(5)
        if self.fail_with is not None:
            raise self.fail_with
        return [
            ImageCandidate(url=f"https://picsum.photos/id/{i}/400/300")
            for i in range(self.num_images)
        ]

    def fetch_quotes(self):
        with self._lock:
            self.quote_calls += 1
        return [
            QuoteCandidate(author=f"Author {i}", body=f"Quote body {i}")
            for i in range(self.num_quotes)
        ]


@pytest.fixture
def fetcher():
    return StubFetcher()


@pytest.fixture
def store():
    session_store = SessionStore()
    yield session_store
    session_store.reset()


@pytest.fixture
def game_service(store, fetcher):
    return SimilarityGameService(store=store, fetcher=fetcher, generation_timeout=5)


@pytest.fixture
def app_config():
    return AppServiceConfig(
        environment="development",
        quote_api_key="test-key",
        generation_timeout_seconds=5,
    )


@pytest.fixture
def services(app_config, fetcher):
    return AppServices(app_config, fetcher=fetcher)


@pytest.fixture
def app(services):
    app = create_app(services=services)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
