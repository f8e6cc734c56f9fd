"""Dashboard - one monitoring session.

Wires the device client, history store, acquisition loop, control
dispatcher and chart selection together and exposes the read-only view a
presentation layer needs.

Example::

    from airq_monitor import Dashboard, MonitorConfig

    async with Dashboard(MonitorConfig(device_host="192.168.1.50")) as dash:
        await dash.refresh()
        print(dash.status())
        await dash.set_fan_state("auto")
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from airq_monitor.acquisition import AcquisitionLoop, FetchStats
from airq_monitor.classification import AirQualityStatus
from airq_monitor.client import DeviceClient
from airq_monitor.config import MonitorConfig
from airq_monitor.control import Action, ControlDispatcher
from airq_monitor.history import HistoryStore
from airq_monitor.models import Reading
from airq_monitor.parameters import Parameter
from airq_monitor.series import ParameterSelection, SeriesView, extract_series

__all__ = ["Dashboard"]

logger = logging.getLogger("airq_monitor.dashboard")


class Dashboard:
    """High-level API for a single device session.

    Parameters:
        config: Session settings; defaults to :class:`MonitorConfig` defaults.
        client: Pre-built client (tests inject one backed by a mock transport).
    """

    def __init__(self, config: MonitorConfig | None = None, *, client: DeviceClient | None = None) -> None:
        self.config = config or MonitorConfig()
        self.client = client or DeviceClient(self.config.base_url, timeout_s=self.config.timeout_s)
        self.history = HistoryStore(self.config.history_capacity)
        self.selection = ParameterSelection(self.config.parameter)
        self.acquisition = AcquisitionLoop(self.client, self.history, interval_s=self.config.poll_interval_s)
        self.controls = ControlDispatcher(self.client)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self, *, poll: bool = True) -> None:
        """Connect to the device and, unless *poll* is false, start polling."""
        await self.client.connect()
        if poll:
            self.acquisition.start()
        logger.info(
            "Dashboard session started: %s (history=%d, parameter=%s)",
            self.client.base_url,
            self.history.capacity,
            self.selection.current,
        )

    async def close(self) -> None:
        """Cancel polling and release the HTTP client."""
        await self.acquisition.stop()
        await self.client.close()
        logger.info("Dashboard session closed after %d readings", self.stats.successes)

    async def __aenter__(self) -> Dashboard:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def snapshot(self) -> tuple[Reading, ...]:
        return self.history.snapshot()

    @property
    def latest(self) -> Reading | None:
        return self.history.latest

    def status(self) -> AirQualityStatus | None:
        """Classification of the latest reading, or ``None`` before the first one."""
        latest = self.history.latest
        if latest is None:
            return None
        return AirQualityStatus.for_level(latest.level)

    def series(self) -> SeriesView:
        """Series for the currently selected parameter."""
        return extract_series(self.history, self.selection.current)

    @property
    def stats(self) -> FetchStats:
        return self.acquisition.stats

    def subscribe(self, listener: Callable[[Reading], object]) -> Callable[[], None]:
        return self.history.subscribe(listener)

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    def select_parameter(self, name: Parameter | str) -> Parameter:
        return self.selection.select(name)

    async def refresh(self) -> Reading | None:
        """Pull-to-refresh: one fetch through the shared path."""
        return await self.acquisition.refresh()

    async def set_fan_state(self, action: Action | str) -> bool:
        return await self.controls.set_fan_state(action)

    async def set_buzzer_state(self, action: Action | str) -> bool:
        return await self.controls.set_buzzer_state(action)
