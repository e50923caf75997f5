"""
Unit tests for the TTL response cache (src/assistant/response_cache.py).

Time is driven by an injected clock; the sweep thread is only started in the
lifecycle tests.
"""

import pytest

from src.assistant.response_cache import ResponseCache


def test_put_then_get_returns_payload(cache):
    cache.put("k", {"themes": [{"name": "A", "items": []}]})

    entry = cache.get("k")

    assert entry is not None
    assert entry.key == "k"
    assert entry.payload == {"themes": [{"name": "A", "items": []}]}


def test_missing_key_returns_none(cache):
    assert cache.get("nope") is None


def test_entry_served_just_before_ttl(cache, clock):
    cache.put("k", {"v": 1})
    clock.advance(3599)
    assert cache.get("k") is not None


def test_entry_expires_at_ttl(cache, clock):
    cache.put("k", {"v": 1})
    clock.advance(3600)

    assert cache.get("k") is None
    assert "k" not in cache


def test_put_replaces_and_resets_age(cache, clock):
    cache.put("k", {"v": 1})
    clock.advance(3000)
    cache.put("k", {"v": 2})
    clock.advance(3000)

    entry = cache.get("k")
    assert entry is not None
    assert entry.payload == {"v": 2}


def test_stored_payload_is_isolated_from_caller(cache):
    payload = {"themes": [{"name": "A", "items": [{"id": "c1"}]}]}
    cache.put("k", payload)
    payload["themes"][0]["name"] = "mutated"

    first = cache.get("k")
    first.payload["themes"].clear()

    assert cache.get("k").payload == {"themes": [{"name": "A", "items": [{"id": "c1"}]}]}


def test_sweep_removes_only_expired(cache, clock):
    cache.put("old", 1)
    clock.advance(2000)
    cache.put("new", 2)
    clock.advance(1600)

    removed = cache.sweep()

    assert removed == 1
    assert "old" not in cache
    assert "new" in cache
    assert len(cache) == 1


def test_sweep_accepts_explicit_now(cache, clock):
    cache.put("k", 1)
    assert cache.sweep(now=clock() + 10) == 0
    assert cache.sweep(now=clock() + 3600) == 1


def test_clear_empties_cache(cache):
    cache.put("a", 1)
    cache.put("b", 2)
    cache.clear()
    assert len(cache) == 0


@pytest.mark.parametrize("kwargs", [{"ttl_seconds": 0}, {"sweep_interval_seconds": -1}])
def test_rejects_non_positive_settings(kwargs):
    with pytest.raises(ValueError):
        ResponseCache(**kwargs)


def test_sweeper_start_and_stop():
    cache = ResponseCache(ttl_seconds=60, sweep_interval_seconds=0.01)
    assert not cache.is_running()

    cache.start()
    cache.start()  # idempotent
    try:
        assert cache.is_running()
    finally:
        cache.stop(timeout=1.0)

    assert not cache.is_running()


def test_sweeper_thread_evicts_expired_entries(clock):
    cache = ResponseCache(ttl_seconds=10, sweep_interval_seconds=0.01, clock=clock)
    cache.put("k", 1)
    clock.advance(11)

    cache.start()
    try:
        for _ in range(200):
            if "k" not in cache:
                break
            cache._stop_event.wait(0.01)
    finally:
        cache.stop(timeout=1.0)

    assert "k" not in cache


def test_stop_without_start_is_noop(cache):
    cache.stop()
    assert not cache.is_running()
