"""HTTP client for the sensor device.

Every call is a plain ``GET`` against the device's base URL with a bounded
timeout.  Transport and protocol problems are translated into the failure
types from :mod:`airq_monitor.errors`; callers decide whether to swallow them.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from airq_monitor.errors import CommandRejected, HttpStatusFailure, NetworkFailure, ParseFailure

__all__ = ["DEFAULT_TIMEOUT_S", "DeviceClient", "SENSOR_PATH"]

logger = logging.getLogger("airq_monitor.client")

SENSOR_PATH = "/sensor"
DEFAULT_TIMEOUT_S = 5.0


class DeviceClient:
    """Async client for one air-quality device.

    Parameters:
        base_url: Device root, e.g. ``"http://192.168.1.50"``.
        timeout_s: Per-request timeout in seconds.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout_s
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> None:
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self._timeout),
            transport=self._transport,
        )
        logger.info("DeviceClient ready - target: %s", self.base_url)

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("DeviceClient closed")

    async def __aenter__(self) -> DeviceClient:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def read_sensor(self) -> Any:
        """``GET /sensor`` and return the decoded JSON body."""
        return await self.get_json(SENSOR_PATH)

    async def send_command(self, peripheral: str, action: str) -> dict[str, Any]:
        """``GET /<peripheral>/<action>``.

        Raises :class:`CommandRejected` unless the body is an object whose
        ``status`` is ``"success"``.
        """
        path = f"/{peripheral}/{action}"
        body = await self.get_json(path)
        status = body.get("status") if isinstance(body, dict) else None
        if status != "success":
            raise CommandRejected(status, url=self.base_url + path)
        return body

    async def get_json(self, path: str) -> Any:
        """Issue a ``GET`` and decode the JSON body of a 200 response."""
        if self._client is None:
            raise RuntimeError("DeviceClient is not connected")

        url = self.base_url + path
        try:
            resp = await self._client.get(path)
        except httpx.HTTPError as exc:
            raise NetworkFailure(f"GET {url} failed: {exc!r}") from exc

        logger.debug("GET %s - HTTP %d - %d bytes", url, resp.status_code, len(resp.content))
        if resp.status_code != 200:
            raise HttpStatusFailure(resp.status_code, url=url)

        try:
            return resp.json()
        except ValueError as exc:
            raise ParseFailure(f"GET {url} returned invalid JSON: {exc}") from exc
