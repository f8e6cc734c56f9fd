"""Shared fixtures - an in-process stand-in for the sensor device."""

from __future__ import annotations

import collections
from typing import Any

import httpx
import pytest

from airq_monitor.client import DeviceClient

BASE_URL = "http://device.test"


def sensor_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "CO2": 612,
        "Ammonia": 140,
        "NO2": 21,
        "Benzene": 3,
        "Temperature": 24.5,
        "Humidity": 41,
        "AirQuality": "Good",
        "Fan": "OFF",
        "FanMode": "AUTO",
        "Buzzer": "OFF",
        "BuzzerMode": "MANUAL",
        "Thresholds": {"CO2": 1500},
    }
    payload.update(overrides)
    return payload


class FakeDevice:
    """Serves queued responses per path; unqueued paths use the defaults.

    Queue entries are ``httpx.Response`` objects, JSON-able bodies (sent
    with status 200) or exceptions (raised as transport errors).
    """

    def __init__(self) -> None:
        self.queues: dict[str, collections.deque[Any]] = collections.defaultdict(collections.deque)
        self.defaults: dict[str, Any] = {"/sensor": sensor_payload()}
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def queue(self, path: str, *responses: Any) -> None:
        self.queues[path].extend(responses)

    def paths(self) -> list[str]:
        return [req.url.path for req in self.requests]

    def client(self, timeout_s: float = 1.0) -> DeviceClient:
        return DeviceClient(BASE_URL, timeout_s=timeout_s, transport=self.transport)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if self.queues[path]:
            item = self.queues[path].popleft()
        elif path in self.defaults:
            item = self.defaults[path]
        elif path.startswith(("/fan/", "/buzzer/")):
            item = {"status": "success"}
        else:
            item = httpx.Response(404, text="not found")

        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            return item
        return httpx.Response(200, json=item)


@pytest.fixture()
def device() -> FakeDevice:
    return FakeDevice()


@pytest.fixture(name="sensor_payload")
def sensor_payload_fixture():
    """Factory for ``/sensor`` bodies: ``sensor_payload(CO2=900)``."""
    return sensor_payload
