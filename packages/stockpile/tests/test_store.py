import asyncio
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from stockpile.registry import InstanceStore, NotFoundError


class Thing:
    pass


def test_lookup_returns_none_and_get_raises_for_missing_key():
    store = InstanceStore()

    assert store.lookup("missing") is None
    with pytest.raises(NotFoundError):
        store.get("missing")
    # NotFoundError doubles as a LookupError
    with pytest.raises(LookupError):
        store.get("missing")


def test_insert_if_absent_builds_once_and_returns_stored_instance():
    store = InstanceStore()
    calls = []

    def build():
        calls.append(1)
        return Thing()

    first = store.insert_if_absent("k", build)
    second = store.insert_if_absent("k", build)

    assert first is second
    assert len(calls) == 1
    assert store.get("k") is first


def test_failed_factory_leaves_no_entry():
    store = InstanceStore()

    def explode():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        store.insert_if_absent("k", explode)

    assert "k" not in store
    assert len(store) == 0

    # a later attempt builds normally
    thing = store.insert_if_absent("k", Thing)
    assert store.get("k") is thing


def test_failed_factory_releases_its_build_lock():
    store = InstanceStore()

    def explode():
        raise RuntimeError("boom")

    for _ in range(3):
        with pytest.raises(RuntimeError):
            store.insert_if_absent("k", explode)

    assert store._building == {}


def test_build_locks_are_dropped_after_success():
    store = InstanceStore()

    store.insert_if_absent("k", Thing)
    store.insert_if_absent("k", Thing)

    assert store._building == {}


def test_waiter_retries_after_failed_build_and_lock_is_dropped():
    store = InstanceStore()
    started = threading.Event()
    release = threading.Event()
    attempts = []
    errors = []

    def flaky():
        attempts.append(1)
        if len(attempts) == 1:
            started.set()
            release.wait(timeout=5)
            raise RuntimeError("first build fails")
        return Thing()

    def first_caller():
        try:
            store.insert_if_absent("k", flaky)
        except RuntimeError as exc:
            errors.append(exc)

    t = threading.Thread(target=first_caller)
    t.start()
    assert started.wait(timeout=5)

    with ThreadPoolExecutor(max_workers=1) as pool:
        waiter = pool.submit(store.insert_if_absent, "k", flaky)
        release.set()
        built = waiter.result(timeout=5)
    t.join(timeout=5)

    assert len(errors) == 1
    assert isinstance(built, Thing)
    assert store.get("k") is built
    assert len(attempts) == 2
    assert store._building == {}


def test_store_overwrite_is_last_write_wins():
    store = InstanceStore()
    a, b = Thing(), Thing()

    assert store.store_overwrite("alias", a) is a
    assert store.store_overwrite("alias", b) is b
    assert store.get("alias") is b
    assert store.count() == 1


def test_remove_all_keys_for_matches_by_identity_only():
    store = InstanceStore()
    target = [1, 2]
    equal_but_distinct = [1, 2]

    store.store_overwrite("construct", target)
    store.store_overwrite("alias", target)
    store.store_overwrite("other", equal_but_distinct)

    assert store.remove_all_keys_for(target) == 2
    assert store.keys() == ("other",)
    assert store.get("other") is equal_but_distinct


def test_remove_all_keys_for_unknown_instance_is_noop():
    store = InstanceStore()
    store.store_overwrite("k", Thing())

    assert store.remove_all_keys_for(Thing()) == 0
    assert len(store) == 1


def test_clear_drops_everything():
    store = InstanceStore()
    store.store_overwrite("a", Thing())
    store.insert_if_absent("b", Thing)

    store.clear()

    assert len(store) == 0
    assert store.keys() == ()


def test_concurrent_insert_if_absent_constructs_once():
    store = InstanceStore()
    workers = 50
    barrier = threading.Barrier(workers)
    calls = []
    calls_lock = threading.Lock()

    def build():
        with calls_lock:
            calls.append(1)
        time.sleep(0.01)
        return Thing()

    def worker(_):
        barrier.wait()
        return store.insert_if_absent("shared", build)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(worker, range(workers)))

    assert len(calls) == 1
    assert all(r is results[0] for r in results)
    assert store._building == {}


def test_slow_build_does_not_block_other_keys():
    store = InstanceStore()
    started = threading.Event()
    release = threading.Event()

    def slow():
        started.set()
        release.wait(timeout=5)
        return Thing()

    t = threading.Thread(target=store.insert_if_absent, args=("slow", slow))
    t.start()
    try:
        assert started.wait(timeout=5)
        fast = store.insert_if_absent("fast", Thing)
        assert store.get("fast") is fast
        assert "slow" not in store
    finally:
        release.set()
        t.join(timeout=5)

    assert "slow" in store


def test_async_wrappers_mirror_sync_behaviour():
    store = InstanceStore()
    thing = Thing()

    async def scenario():
        built = await store.ainsert_if_absent("k", lambda: thing)
        await store.astore_overwrite("alias", thing)
        looked_up = await store.alookup("alias")
        fetched = await store.aget("k")
        removed = await store.aremove_all_keys_for(thing)
        return built, looked_up, fetched, removed

    built, looked_up, fetched, removed = asyncio.run(scenario())

    assert built is thing
    assert looked_up is thing
    assert fetched is thing
    assert removed == 2
    assert len(store) == 0
