import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest
from branding.services import SingleFlightCache


def test_concurrent_callers_share_one_load():
    cache = SingleFlightCache()
    started = threading.Event()
    release = threading.Event()
    calls = []

    def loader():
        calls.append(1)
        started.set()
        release.wait(timeout=5)
        return "https://cdn.example.com/logo.png"

    with ThreadPoolExecutor(max_workers=4) as pool:
        first = pool.submit(cache.get, loader)
        assert started.wait(timeout=5)
        assert cache.state == "in_flight"
        others = [pool.submit(cache.get, loader) for _ in range(3)]
        release.set()
        results = [first.result(timeout=5)] + [f.result(timeout=5) for f in others]

    assert results == ["https://cdn.example.com/logo.png"] * 4
    assert len(calls) == 1
    assert cache.state == "resolved"


def test_resolved_value_is_reused_until_invalidated():
    cache = SingleFlightCache()
    values = iter(["a", "b"])

    assert cache.get(lambda: next(values)) == "a"
    assert cache.get(lambda: next(values)) == "a"
    cache.invalidate()
    assert cache.state == "unresolved"
    assert cache.get(lambda: next(values)) == "b"


def test_failure_reaches_waiters_and_resets():
    cache = SingleFlightCache()
    started = threading.Event()
    release = threading.Event()

    def failing():
        started.set()
        release.wait(timeout=5)
        raise RuntimeError("store down")

    entered = threading.Event()

    def wait_for_shared_load():
        entered.set()
        return cache.get(lambda: "never")

    with ThreadPoolExecutor(max_workers=2) as pool:
        first = pool.submit(cache.get, failing)
        assert started.wait(timeout=5)
        waiter = pool.submit(wait_for_shared_load)
        assert entered.wait(timeout=5)
        time.sleep(0.1)
        release.set()
        with pytest.raises(RuntimeError):
            first.result(timeout=5)
        with pytest.raises(RuntimeError):
            waiter.result(timeout=5)

    assert cache.state == "unresolved"
    assert cache.get(lambda: "recovered") == "recovered"
