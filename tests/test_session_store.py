import random
import threading
import time

from prompt_formats import Session
from session_store import CODE_MAX, CODE_MIN, SessionStore


def test_allocated_codes_are_distinct_and_in_range():
    store = SessionStore(rng=random.Random(7))
    codes = [store.allocate_code() for _ in range(500)]

    assert len(set(codes)) == len(codes)
    assert all(CODE_MIN <= code < CODE_MAX for code in codes)
    assert all(store.is_reserved(code) for code in codes)


def test_allocation_skips_codes_reserved_by_sessions():
    class ScriptedRandom:
        def __init__(self, values):
            self.values = list(values)

        def randrange(self, _start, _stop):
            return self.values.pop(0)

    store = SessionStore(rng=ScriptedRandom([4521, 4521, 1234]))
    store.put(Session(code=4521, capacity=2, requested_prompt_count=3))

    assert store.allocate_code() == 1234


def test_concurrent_allocation_never_hands_out_the_same_code():
    store = SessionStore()
    results = []
    results_lock = threading.Lock()

    def _worker():
        local = [store.allocate_code() for _ in range(50)]
        with results_lock:
            results.extend(local)

    threads = [threading.Thread(target=_worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(results) == 400
    assert len(set(results)) == 400


def test_put_replaces_existing_session_and_returns_previous():
    store = SessionStore()
    first = Session(code=4521, capacity=2, requested_prompt_count=3)
    second = Session(code=4521, capacity=5, requested_prompt_count=1)

    assert store.put(first) is None
    assert store.put(second) is first
    assert store.get(4521) is second
    assert len(store) == 1


def test_prune_stale_releases_codes():
    store = SessionStore()
    old = Session(code=1111, capacity=2, requested_prompt_count=1)
    old.updated_at = time.time() - 3600
    fresh = Session(code=2222, capacity=2, requested_prompt_count=1)
    store.put(old)
    store.put(fresh)

    assert store.prune_stale(60) == [1111]
    assert 1111 not in store
    assert not store.is_reserved(1111)
    assert 2222 in store
    assert store.prune_stale(0) == []


def test_reset_clears_sessions_and_reservations():
    store = SessionStore()
    code = store.allocate_code()
    store.put(Session(code=4521, capacity=2, requested_prompt_count=3))

    store.reset()

    assert len(store) == 0
    assert not store.is_reserved(code)
    assert store.snapshot() == {}


def test_snapshot_serializes_sessions_by_code():
    store = SessionStore()
    session = Session(code=4521, capacity=2, requested_prompt_count=3)
    session.players.append("alice")
    store.put(session)

    snapshot = store.snapshot()

    assert snapshot == {
        "4521": {
            "code": 4521,
            "users": ["alice"],
            "num_players": 2,
            "num_complete": 0,
            "num_prompts": 3,
            "prompts": None,
            "created_at": session.created_at,
            "updated_at": session.updated_at,
        }
    }
