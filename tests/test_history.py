"""Tests for airq_monitor.history - HistoryStore FIFO behaviour."""

from __future__ import annotations

import pytest

from airq_monitor.history import DEFAULT_CAPACITY, HistoryStore
from airq_monitor.models import Reading

# -----------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------


def _make_readings(n: int, start: int = 0) -> list[Reading]:
    return [Reading(co2=float(i), timestamp=1_700_000_000.0 + i) for i in range(start, start + n)]


# -----------------------------------------------------------------------
# Tests
# -----------------------------------------------------------------------


class TestHistoryStoreAppend:
    """append() and FIFO eviction."""

    def test_starts_empty(self) -> None:
        store = HistoryStore()
        assert len(store) == 0
        assert store.latest is None
        assert store.snapshot() == ()
        assert store.capacity == DEFAULT_CAPACITY == 50

    def test_append_below_capacity(self) -> None:
        store = HistoryStore()
        prior = _make_readings(10)
        for r in prior:
            store.append(r)
        new = Reading(co2=999.0)
        store.append(new)
        assert len(store) == 11
        assert store.snapshot() == (*prior, new)
        assert store.latest is new

    def test_append_at_capacity_evicts_oldest(self) -> None:
        store = HistoryStore(capacity=50)
        prior = _make_readings(50)
        for r in prior:
            store.append(r)
        new = Reading(co2=999.0)
        store.append(new)

        snap = store.snapshot()
        assert len(snap) == 50
        assert snap[0] is prior[1]
        assert snap[-1] is new

    def test_never_exceeds_capacity(self) -> None:
        store = HistoryStore(capacity=3)
        for r in _make_readings(10):
            store.append(r)
        assert [r.co2 for r in store] == [7.0, 8.0, 9.0]

    def test_invalid_capacity(self) -> None:
        with pytest.raises(ValueError, match="capacity"):
            HistoryStore(capacity=0)

    def test_snapshot_is_detached(self) -> None:
        store = HistoryStore()
        store.append(Reading())
        snap = store.snapshot()
        store.append(Reading())
        assert len(snap) == 1
        assert len(store) == 2


class TestHistoryStoreSubscribe:
    """Listeners see every append."""

    def test_listener_called_after_append(self) -> None:
        store = HistoryStore()
        seen: list[tuple[Reading, int]] = []
        store.subscribe(lambda r: seen.append((r, len(store))))
        r = Reading(co2=1.0)
        store.append(r)
        assert seen == [(r, 1)]

    def test_unsubscribe(self) -> None:
        store = HistoryStore()
        seen: list[Reading] = []
        unsubscribe = store.subscribe(seen.append)
        store.append(Reading())
        unsubscribe()
        store.append(Reading())
        assert len(seen) == 1

    def test_failing_listener_is_isolated(self, caplog: pytest.LogCaptureFixture) -> None:
        store = HistoryStore()
        seen: list[Reading] = []

        def _boom(_r: Reading) -> None:
            raise RuntimeError("listener broke")

        store.subscribe(_boom)
        store.subscribe(seen.append)
        store.append(Reading())

        assert len(store) == 1
        assert len(seen) == 1
        assert "History listener" in caplog.text
