"""Chart selection state and series extraction."""

from __future__ import annotations

from collections.abc import Iterator

from airq_monitor.history import HistoryStore
from airq_monitor.parameters import DEFAULT_PARAMETER, Parameter, get_parameter_info, parse_parameter

__all__ = ["ParameterSelection", "SeriesView", "extract_series"]


class ParameterSelection:
    """Which measurement is currently charted."""

    def __init__(self, default: Parameter | str = DEFAULT_PARAMETER) -> None:
        self._current = parse_parameter(default)

    @property
    def current(self) -> Parameter:
        return self._current

    def select(self, name: Parameter | str) -> Parameter:
        """Change the selection; unknown names raise ``ValueError``."""
        self._current = parse_parameter(name)
        return self._current


class SeriesView:
    """``(index, value)`` pairs for one parameter over a history store.

    Nothing is cached: every iteration reads the store as it is at that
    moment, so the view can be iterated any number of times.
    """

    def __init__(self, history: HistoryStore, parameter: Parameter | str) -> None:
        self._history = history
        self.parameter = parse_parameter(parameter)
        self._field = get_parameter_info(self.parameter).field

    def __iter__(self) -> Iterator[tuple[int, float]]:
        for index, reading in enumerate(self._history.snapshot()):
            yield index, getattr(reading, self._field)

    def __len__(self) -> int:
        return len(self._history)

    def values(self) -> list[float]:
        return [value for _index, value in self]


def extract_series(history: HistoryStore, parameter: Parameter | str) -> SeriesView:
    """Return a lazy view of *parameter* across *history*, in store order."""
    return SeriesView(history, parameter)
