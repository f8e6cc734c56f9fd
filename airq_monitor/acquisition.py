"""Acquisition loop - keeps the history store fresh.

One ``fetch_once()`` path is shared by two triggers: the periodic timer
started with :meth:`AcquisitionLoop.start` and manual refreshes through
:meth:`AcquisitionLoop.refresh`.  Failures are logged, counted and
swallowed; the next tick simply tries again.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal

from pydantic import BaseModel, Field

from airq_monitor.client import DeviceClient
from airq_monitor.errors import MonitorError
from airq_monitor.history import HistoryStore
from airq_monitor.models import Reading

__all__ = ["AcquisitionLoop", "DEFAULT_INTERVAL_S", "FetchStats"]

logger = logging.getLogger("airq_monitor.acquisition")

DEFAULT_INTERVAL_S = 10.0


class FetchStats(BaseModel):
    """Diagnostic counters for the fetch cycle.

    Attributes:
        attempts: Number of ``fetch_once()`` calls.
        successes: Readings appended to the store.
        failures: Failed fetches keyed by failure kind
            (``network``, ``http_status``, ``parse``).
        last_error: Message of the most recent failure.
        last_success: Epoch timestamp of the most recent appended reading.
    """

    attempts: int = 0
    successes: int = 0
    failures: dict[str, int] = Field(default_factory=dict)
    last_error: str | None = None
    last_success: float | None = None

    @property
    def failure_count(self) -> int:
        return sum(self.failures.values())


class AcquisitionLoop:
    """Polls the device and appends parsed readings to a history store.

    Parameters:
        client: Connected :class:`DeviceClient`.
        history: Store that receives every successfully parsed reading.
        interval_s: Seconds between periodic fetches.
    """

    def __init__(
        self,
        client: DeviceClient,
        history: HistoryStore,
        *,
        interval_s: float = DEFAULT_INTERVAL_S,
    ) -> None:
        if interval_s <= 0:
            raise ValueError(f"interval_s must be > 0, got {interval_s}")
        self._client = client
        self.history = history
        self.interval_s = interval_s
        self.stats = FetchStats()
        self._timer_task: asyncio.Task[None] | None = None
        self._inflight: set[asyncio.Task[Reading | None]] = set()

    # ------------------------------------------------------------------
    # Fetch cycle
    # ------------------------------------------------------------------

    async def fetch_once(self) -> Reading | None:
        """GET the sensor endpoint, parse it and append the reading.

        Returns the appended reading, or ``None`` when the fetch failed.
        Never raises for network, status or parse failures.
        """
        self.stats.attempts += 1
        try:
            payload = await self._client.read_sensor()
            reading = Reading.from_payload(payload)
        except MonitorError as exc:
            self._record_failure(exc)
            return None

        self.history.append(reading)
        self.stats.successes += 1
        self.stats.last_success = reading.timestamp
        logger.debug(
            "Fetched reading: level=%s co2=%.1f (history=%d)",
            reading.level,
            reading.co2,
            len(self.history),
        )
        return reading

    async def refresh(self) -> Reading | None:
        """Manual trigger; does not reset or skip the periodic timer."""
        return await self.fetch_once()

    def _record_failure(self, exc: MonitorError) -> None:
        self.stats.failures[exc.kind] = self.stats.failures.get(exc.kind, 0) + 1
        self.stats.last_error = str(exc)
        logger.warning("Fetch failed (%s): %s", exc.kind, exc)

    # ------------------------------------------------------------------
    # Periodic timer
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._timer_task is not None and not self._timer_task.done()

    def start(self) -> None:
        """Fetch immediately, then every ``interval_s`` until :meth:`stop`."""
        if self.running:
            return
        self._timer_task = asyncio.create_task(self._timer_loop(), name="airq-acquisition")
        logger.info("Acquisition started (every %.1fs)", self.interval_s)

    async def stop(self) -> None:
        """Cancel the timer and any fetches it launched."""
        tasks: list[asyncio.Task] = list(self._inflight)
        if self._timer_task is not None:
            tasks.append(self._timer_task)
            self._timer_task = None
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._inflight.clear()
        if tasks:
            logger.info("Acquisition stopped")

    async def _timer_loop(self) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        while True:
            # Each tick gets its own task so a hung device never delays the next one.
            task = asyncio.create_task(self.fetch_once())
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)

            next_tick += self.interval_s
            await asyncio.sleep(max(0.0, next_tick - loop.time()))

    # ------------------------------------------------------------------
    # Blocking entry points
    # ------------------------------------------------------------------

    def run(self, duration_s: float | None = None) -> None:
        """Blocking entry point - polls until Ctrl-C or *duration_s* elapses."""
        try:
            asyncio.run(self.run_async(duration_s=duration_s))
        except KeyboardInterrupt:
            logger.info("Interrupted by user")

    async def run_async(self, duration_s: float | None = None) -> None:
        """Poll inside the current event loop until stopped.

        The client is connected for the duration of the run when it is not
        already.
        """
        owns_client = not self._client.connected
        if owns_client:
            await self._client.connect()

        # NotImplementedError: Windows.  RuntimeError: not in the main thread.
        loop = asyncio.get_running_loop()
        stop_event = asyncio.Event()
        installed: list[signal.Signals] = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError, RuntimeError):
                loop.add_signal_handler(sig, stop_event.set)
                installed.append(sig)

        self.start()
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=duration_s)
            logger.info("Stop signal received - shutting down")
        except asyncio.TimeoutError:
            logger.info("Duration reached (%.1fs) - stopping", duration_s)
        except asyncio.CancelledError:
            logger.info("Acquisition cancelled")
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)
            await self.stop()
            if owns_client:
                await self._client.close()
