"""Unit tests for the database handle cache."""

import threading
from concurrent.futures import ThreadPoolExecutor

from dbfunc.core.cache import DatabaseCache, get_database_cache


def test_get_or_create_calls_factory_once_per_key(database_cache: DatabaseCache) -> None:
    calls: list[str] = []

    def factory(connection_string: str) -> object:
        calls.append(connection_string)
        return object()

    first = database_cache.get_or_create("db1", factory)
    second = database_cache.get_or_create("db1", factory)
    other = database_cache.get_or_create("db2", factory)

    assert first is second
    assert other is not first
    assert calls == ["db1", "db2"]
    assert len(database_cache) == 2
    assert "db1" in database_cache


def test_get_returns_none_for_unknown_key(database_cache: DatabaseCache) -> None:
    assert database_cache.get("missing") is None
    assert "missing" not in database_cache


def test_existing_entry_is_never_replaced(database_cache: DatabaseCache) -> None:
    original = database_cache.get_or_create("db", lambda _: "first")
    assert database_cache.get_or_create("db", lambda _: "second") == original == "first"


def test_concurrent_first_use_creates_one_handle(database_cache: DatabaseCache) -> None:
    """Threads racing on an empty key all receive the same handle."""
    workers = 16
    barrier = threading.Barrier(workers)
    calls: list[str] = []
    calls_lock = threading.Lock()

    def factory(connection_string: str) -> object:
        with calls_lock:
            calls.append(connection_string)
        return object()

    def worker() -> object:
        barrier.wait()
        return database_cache.get_or_create("shared", factory)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        handles = list(pool.map(lambda _: worker(), range(workers)))

    assert len(calls) == 1
    assert all(handle is handles[0] for handle in handles)


def test_slow_factory_does_not_block_other_keys(database_cache: DatabaseCache) -> None:
    started = threading.Event()
    release = threading.Event()

    def slow_factory(_: str) -> str:
        started.set()
        release.wait(timeout=5)
        return "slow"

    with ThreadPoolExecutor(max_workers=1) as pool:
        future = pool.submit(database_cache.get_or_create, "slow-db", slow_factory)
        assert started.wait(timeout=5)
        assert database_cache.get_or_create("fast-db", lambda _: "fast") == "fast"
        release.set()
        assert future.result(timeout=5) == "slow"


def test_get_database_cache_is_a_singleton() -> None:
    assert get_database_cache() is get_database_cache()
