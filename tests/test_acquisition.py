"""Tests for airq_monitor.acquisition - fetch cycle and periodic timer."""

from __future__ import annotations

import asyncio
import logging
from unittest.mock import patch

import httpx
import pytest

from airq_monitor.acquisition import AcquisitionLoop
from airq_monitor.history import HistoryStore

# -----------------------------------------------------------------------
# fetch_once
# -----------------------------------------------------------------------


class TestFetchOnce:
    """One GET + parse + conditional append; failures never raise."""

    @pytest.mark.asyncio
    async def test_success_appends(self, device) -> None:
        history = HistoryStore()
        async with device.client() as client:
            loop = AcquisitionLoop(client, history)
            reading = await loop.fetch_once()

        assert reading is not None
        assert history.latest is reading
        assert reading.co2 == 612.0
        assert loop.stats.successes == 1

    @pytest.mark.asyncio
    async def test_three_successes_then_http_500(self, device, sensor_payload) -> None:
        device.queue(
            "/sensor",
            sensor_payload(CO2=1),
            sensor_payload(CO2=2),
            sensor_payload(CO2=3),
            httpx.Response(500),
        )
        history = HistoryStore()
        async with device.client() as client:
            loop = AcquisitionLoop(client, history)
            for _ in range(3):
                await loop.fetch_once()
            before = history.snapshot()
            result = await loop.fetch_once()

        assert result is None
        assert [r.co2 for r in history] == [1.0, 2.0, 3.0]
        assert history.snapshot() == before
        assert loop.stats.failures == {"http_status": 1}

    @pytest.mark.asyncio
    async def test_missing_thresholds_does_not_append(self, device, sensor_payload) -> None:
        payload = sensor_payload()
        del payload["Thresholds"]
        device.queue("/sensor", payload)
        history = HistoryStore()
        async with device.client() as client:
            loop = AcquisitionLoop(client, history)
            assert await loop.fetch_once() is None

        assert len(history) == 0
        assert loop.stats.failures == {"parse": 1}
        assert "Thresholds" in (loop.stats.last_error or "")

    @pytest.mark.asyncio
    async def test_network_failure_is_logged(self, device, caplog: pytest.LogCaptureFixture) -> None:
        device.queue("/sensor", httpx.ConnectError("connection refused"))
        history = HistoryStore()
        async with device.client() as client:
            loop = AcquisitionLoop(client, history)
            assert await loop.fetch_once() is None

        assert len(history) == 0
        assert loop.stats.failures == {"network": 1}
        assert "Fetch failed (network)" in caplog.text

    @pytest.mark.asyncio
    async def test_oversized_integer_measurement_reads_as_zero(self, device) -> None:
        device.queue("/sensor", httpx.Response(200, content=b'{"CO2": 1' + b"0" * 400 + b', "Thresholds": {}}'))
        history = HistoryStore()
        async with device.client() as client:
            loop = AcquisitionLoop(client, history)
            reading = await loop.fetch_once()

        assert reading is not None
        assert reading.co2 == 0.0
        assert history.latest is reading

    @pytest.mark.asyncio
    async def test_oversized_threshold_is_a_parse_failure(self, device) -> None:
        device.queue("/sensor", httpx.Response(200, content=b'{"Thresholds": {"CO2": 1' + b"0" * 400 + b"}}"))
        history = HistoryStore()
        async with device.client() as client:
            loop = AcquisitionLoop(client, history)
            assert await loop.fetch_once() is None

        assert len(history) == 0
        assert loop.stats.failures == {"parse": 1}

    @pytest.mark.asyncio
    async def test_integer_beyond_digit_limit_is_a_parse_failure(self, device) -> None:
        device.queue("/sensor", httpx.Response(200, content=b'{"CO2": 1' + b"0" * 5000 + b', "Thresholds": {}}'))
        history = HistoryStore()
        async with device.client() as client:
            loop = AcquisitionLoop(client, history)
            assert await loop.fetch_once() is None

        assert len(history) == 0
        assert loop.stats.failures == {"parse": 1}

    @pytest.mark.asyncio
    async def test_eviction_through_fetch(self, device, sensor_payload) -> None:
        history = HistoryStore(capacity=2)
        device.queue("/sensor", *(sensor_payload(CO2=i) for i in range(3)))
        async with device.client() as client:
            loop = AcquisitionLoop(client, history)
            for _ in range(3):
                await loop.fetch_once()
        assert [r.co2 for r in history] == [1.0, 2.0]

    def test_invalid_interval(self, device) -> None:
        with pytest.raises(ValueError, match="interval_s"):
            AcquisitionLoop(device.client(), HistoryStore(), interval_s=0)


# -----------------------------------------------------------------------
# Periodic timer / manual refresh
# -----------------------------------------------------------------------


class TestTimer:
    """start / stop / refresh scheduling."""

    @pytest.mark.asyncio
    async def test_start_fetches_immediately(self, device) -> None:
        history = HistoryStore()
        async with device.client() as client:
            loop = AcquisitionLoop(client, history, interval_s=10.0)
            loop.start()
            await asyncio.sleep(0.05)
            await loop.stop()
        assert len(history) == 1
        assert not loop.running

    @pytest.mark.asyncio
    async def test_fetches_every_interval(self, device) -> None:
        history = HistoryStore()
        async with device.client() as client:
            loop = AcquisitionLoop(client, history, interval_s=0.05)
            loop.start()
            await asyncio.sleep(0.22)
            await loop.stop()
        assert 3 <= len(history) <= 6

    @pytest.mark.asyncio
    async def test_refresh_uses_same_path_and_keeps_timer(self, device) -> None:
        history = HistoryStore()
        async with device.client() as client:
            loop = AcquisitionLoop(client, history, interval_s=10.0)
            loop.start()
            await asyncio.sleep(0.02)
            reading = await loop.refresh()
            assert loop.running
            await loop.stop()
        assert reading is history.latest
        assert len(history) == 2
        assert loop.stats.attempts == 2

    @pytest.mark.asyncio
    async def test_start_twice_is_noop(self, device) -> None:
        async with device.client() as client:
            loop = AcquisitionLoop(client, HistoryStore(), interval_s=10.0)
            loop.start()
            task = loop._timer_task
            loop.start()
            assert loop._timer_task is task
            await loop.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self, device) -> None:
        loop = AcquisitionLoop(device.client(), HistoryStore())
        await loop.stop()
        assert not loop.running


class TestRun:
    """run_async / run with a short duration."""

    @pytest.mark.asyncio
    async def test_run_async_owns_client(self, device) -> None:
        client = device.client()
        history = HistoryStore()
        loop = AcquisitionLoop(client, history, interval_s=0.05)
        await loop.run_async(duration_s=0.12)
        assert len(history) >= 2
        assert not client.connected
        assert not loop.running

    def test_run_blocking(self, device) -> None:
        history = HistoryStore()
        loop = AcquisitionLoop(device.client(), history, interval_s=0.05)
        loop.run(duration_s=0.12)
        assert len(history) >= 2

    def test_run_interrupted_by_user(self, device, caplog: pytest.LogCaptureFixture) -> None:
        def _interrupt(coro):
            coro.close()
            raise KeyboardInterrupt

        loop = AcquisitionLoop(device.client(), HistoryStore())
        with caplog.at_level(logging.INFO, logger="airq_monitor"):
            with patch("airq_monitor.acquisition.asyncio.run", side_effect=_interrupt):
                loop.run()
        assert "Interrupted by user" in caplog.text
