"""Console view - prints readings to stdout.

Useful for headless monitoring, demos, and checking the device is reachable.
"""

from __future__ import annotations

import json
import sys
import time
from collections.abc import Callable
from typing import IO

from airq_monitor.classification import describe
from airq_monitor.history import HistoryStore
from airq_monitor.models import Reading
from airq_monitor.parameters import PARAMETERS
from airq_monitor.series import SeriesView

__all__ = ["ConsoleView"]


class ConsoleView:
    """Writes a status line for every reading appended to a history store.

    Parameters:
        fmt: Output format - ``"text"`` (human-readable) or ``"json"``
             (one JSON object per reading).
        stream: Writable file-like object (defaults to ``sys.stdout``).
    """

    def __init__(self, *, fmt: str = "text", stream: IO[str] | None = None) -> None:
        if fmt not in ("text", "json"):
            raise ValueError(f"Unknown format '{fmt}' (expected 'text' or 'json')")
        self._fmt = fmt
        self._stream = stream or sys.stdout

    def attach(self, history: HistoryStore) -> Callable[[], None]:
        """Subscribe to *history*; returns the unsubscribe function."""
        return history.subscribe(self.show)

    def show(self, reading: Reading) -> None:
        if self._fmt == "json":
            record = reading.to_dict()
            record["level"] = reading.level.value
            self._stream.write(json.dumps(record) + "\n")
        else:
            self._stream.write(self.render_line(reading) + "\n")
        self._stream.flush()

    @staticmethod
    def render_line(reading: Reading) -> str:
        clock = time.strftime("%H:%M:%S", time.localtime(reading.timestamp))
        values = " ".join(
            f"{param.value}={reading.value_of(param):.1f}{info.unit}" for param, info in PARAMETERS.items()
        )
        return (
            f"[{clock}] {reading.level.value:<9s} {values} "
            f"(fan={reading.fan}/{reading.fan_mode}, buzzer={reading.buzzer}/{reading.buzzer_mode})"
        )

    @staticmethod
    def render_details(reading: Reading) -> str:
        level = reading.level
        info = describe(level)
        lines = [
            f"Air Quality: {level.value} [{info.accent}]",
            f"  {info.description}",
            f"  Device reports: {reading.air_quality}",
            "",
            "Detailed Readings",
        ]
        for param, pinfo in PARAMETERS.items():
            lines.append(
                f"  {param.value:<12s} {reading.value_of(param):>10.1f} {pinfo.unit:<4s} {pinfo.description}"
            )
        lines += [
            "",
            f"Fan:    {reading.fan} ({reading.fan_mode})",
            f"Buzzer: {reading.buzzer} ({reading.buzzer_mode})",
        ]
        if reading.thresholds:
            lines.append("Thresholds: " + ", ".join(f"{k}={v:g}" for k, v in reading.thresholds.items()))
        return "\n".join(lines)

    @staticmethod
    def render_series(series: SeriesView) -> str:
        unit = PARAMETERS[series.parameter].unit
        points = " ".join(f"{value:.1f}" for _index, value in series)
        return f"{series.parameter.value} Readings Over Time ({unit}, n={len(series)}): {points}"
