"""Bounded, insertion-ordered history of readings.

``HistoryStore`` is the only shared state in a dashboard session.  The
acquisition loop is its single writer (through :meth:`HistoryStore.append`);
everything else reads snapshots or subscribes to appends.
"""

from __future__ import annotations

import collections
import logging
from collections.abc import Callable, Iterator

from airq_monitor.models import Reading

__all__ = ["DEFAULT_CAPACITY", "HistoryStore"]

logger = logging.getLogger("airq_monitor.history")

DEFAULT_CAPACITY = 50


class HistoryStore:
    """FIFO ring buffer of :class:`Reading` objects, oldest first.

    Once ``capacity`` readings are held, each append evicts the oldest one.
    Readers always see either the state before or after an append, never a
    partial update.

    Parameters:
        capacity: Maximum number of readings kept (must be >= 1).
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._readings: collections.deque[Reading] = collections.deque(maxlen=capacity)
        self._listeners: list[Callable[[Reading], object]] = []

    # -- write side --

    def append(self, reading: Reading) -> None:
        """Append *reading*, evicting the oldest entry when full."""
        self._readings.append(reading)
        logger.debug("History now holds %d/%d readings", len(self._readings), self.capacity)

        for listener in list(self._listeners):
            try:
                listener(reading)
            except Exception:
                logger.exception("History listener %r failed", listener)

    # -- read side --

    @property
    def capacity(self) -> int:
        return self._readings.maxlen or 0

    @property
    def latest(self) -> Reading | None:
        """Most recently appended reading, or ``None`` when empty."""
        return self._readings[-1] if self._readings else None

    def snapshot(self) -> tuple[Reading, ...]:
        """Immutable copy of the current contents, oldest first."""
        return tuple(self._readings)

    def __len__(self) -> int:
        return len(self._readings)

    def __iter__(self) -> Iterator[Reading]:
        return iter(self.snapshot())

    def __bool__(self) -> bool:
        return bool(self._readings)

    # -- subscriptions --

    def subscribe(self, listener: Callable[[Reading], object]) -> Callable[[], None]:
        """Call *listener* with every reading appended from now on.

        Returns a function that removes the listener again.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe
