"""Air-quality monitor - poll a sensor device, classify its readings and
control its fan and buzzer.

Quick start::

    import asyncio
    from airq_monitor import Dashboard, MonitorConfig

    async def main() -> None:
        async with Dashboard(MonitorConfig(device_host="192.168.1.50")) as dash:
            reading = await dash.refresh()
            print(reading, dash.status())

    asyncio.run(main())
"""

from __future__ import annotations

from airq_monitor.acquisition import AcquisitionLoop, FetchStats
from airq_monitor.classification import AirQualityLevel, AirQualityStatus, classify, describe
from airq_monitor.client import DeviceClient
from airq_monitor.config import MonitorConfig, load_config
from airq_monitor.control import Action, ControlDispatcher, Peripheral
from airq_monitor.dashboard import Dashboard
from airq_monitor.history import HistoryStore
from airq_monitor.models import Reading
from airq_monitor.parameters import Parameter
from airq_monitor.series import ParameterSelection, SeriesView, extract_series

__all__ = [
    "AcquisitionLoop",
    "Action",
    "AirQualityLevel",
    "AirQualityStatus",
    "ControlDispatcher",
    "Dashboard",
    "DeviceClient",
    "FetchStats",
    "HistoryStore",
    "MonitorConfig",
    "Parameter",
    "ParameterSelection",
    "Peripheral",
    "Reading",
    "SeriesView",
    "classify",
    "describe",
    "extract_series",
    "load_config",
]

__version__ = "0.1.0"
