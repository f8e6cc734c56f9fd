"""Failure taxonomy for device I/O.

All four kinds are raised at the HTTP boundary (:mod:`airq_monitor.client`)
and handled where the acquisition loop and the control dispatcher call it.
"""

from __future__ import annotations

__all__ = [
    "CommandRejected",
    "HttpStatusFailure",
    "MonitorError",
    "NetworkFailure",
    "ParseFailure",
]


class MonitorError(Exception):
    """Base class for every recoverable device failure."""

    kind = "error"


class NetworkFailure(MonitorError):
    """Connection refused, DNS failure, timeout, or any other transport error."""

    kind = "network"


class HttpStatusFailure(MonitorError):
    """The device answered with a status other than 200."""

    kind = "http_status"

    def __init__(self, status_code: int, url: str = "") -> None:
        super().__init__(f"HTTP {status_code} from {url}" if url else f"HTTP {status_code}")
        self.status_code = status_code
        self.url = url


class ParseFailure(MonitorError):
    """The body was not valid JSON or lacked a required field."""

    kind = "parse"


class CommandRejected(MonitorError):
    """A control endpoint answered 200 but without ``status == "success"``."""

    kind = "rejected"

    def __init__(self, status: object, url: str = "") -> None:
        super().__init__(f"command rejected with status={status!r}" + (f" ({url})" if url else ""))
        self.status = status
        self.url = url
