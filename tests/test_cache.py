"""Tests for ResultCache and the periodic sweeper."""

import asyncio

import pytest

from app.cache import ResultCache, run_sweeper
from app.schemas.lookup import LookupResult, LookupStatus

TTL = 6 * 60 * 60


def _result(phone: str = "0398981698", name: str = "Target Name") -> LookupResult:
    return LookupResult(phone=phone, name=name, status=LookupStatus.exists, method="title")


def test_put_then_get_returns_same_result(clock):
    cache = ResultCache(TTL, clock=clock)
    result = _result()
    cache.put("0398981698", result)

    assert cache.get("0398981698") == result


def test_get_missing_key_returns_none(clock):
    cache = ResultCache(TTL, clock=clock)
    assert cache.get("0000") is None


def test_entry_hidden_once_ttl_reached_without_sweep(clock):
    cache = ResultCache(TTL, clock=clock)
    cache.put("0398981698", _result())

    clock.advance(TTL - 1)
    assert cache.get("0398981698") is not None

    clock.advance(1)
    assert cache.get("0398981698") is None
    # Logically expired but not yet physically removed
    assert cache.size() == 1


def test_put_refreshes_stored_at(clock):
    cache = ResultCache(TTL, clock=clock)
    cache.put("0398981698", _result(name="Old"))
    clock.advance(TTL - 10)
    cache.put("0398981698", _result(name="New"))
    clock.advance(20)

    cached = cache.get("0398981698")
    assert cached is not None
    assert cached.name == "New"


def test_sweep_removes_only_expired(clock):
    cache = ResultCache(TTL, clock=clock)
    for i in range(3):
        cache.put(f"old{i}", _result(phone=f"old{i}"))
    clock.advance(TTL + 5)
    for i in range(2):
        cache.put(f"new{i}", _result(phone=f"new{i}"))

    removed = cache.sweep()

    assert removed == 3
    assert cache.size() == 2
    assert cache.get("new0") is not None
    assert cache.get("old0") is None


def test_sweep_on_empty_cache(clock):
    cache = ResultCache(TTL, clock=clock)
    assert cache.sweep() == 0


def test_clear_returns_prior_count(clock):
    cache = ResultCache(TTL, clock=clock)
    cache.put("a", _result(phone="a"))
    cache.put("b", _result(phone="b"))

    assert cache.clear() == 2
    assert cache.size() == 0
    assert len(cache) == 0


def test_rejects_non_positive_ttl():
    with pytest.raises(ValueError):
        ResultCache(0)


async def test_sweeper_task_evicts_in_background(clock):
    cache = ResultCache(TTL, clock=clock)
    cache.put("stale", _result(phone="stale"))
    clock.advance(TTL)
    cache.put("fresh", _result(phone="fresh"))

    task = asyncio.create_task(run_sweeper(cache, 0.01))
    await asyncio.sleep(0.05)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert cache.size() == 1
    assert cache.get("fresh") is not None


class _FlakySweepCache(ResultCache):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.sweeps = 0

    def sweep(self) -> int:
        self.sweeps += 1
        if self.sweeps == 1:
            raise RuntimeError("sweep failed")
        return super().sweep()


async def test_sweeper_survives_failed_pass(clock):
    cache = _FlakySweepCache(TTL, clock=clock)
    cache.put("stale", _result(phone="stale"))
    clock.advance(TTL)

    task = asyncio.create_task(run_sweeper(cache, 0.01))
    await asyncio.sleep(0.1)

    assert not task.done()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert cache.sweeps >= 2
    assert cache.size() == 0
