"""Cancellable once-per-second refresh while a fast is active."""

from __future__ import annotations

from typing import Any, Callable, Protocol


class TimerHandle(Protocol):
    def stop(self) -> None: ...


Scheduler = Callable[[float, Callable[[], Any]], TimerHandle]


class FastTicker:
    """Keeps at most one repeating timer alive, and only while fasting.

    `schedule(interval, callback)` must start a repeating timer and return a
    handle with `stop()`; Textual's `App.set_interval` fits.
    """

    def __init__(self, schedule: Scheduler, callback: Callable[[], Any], interval: float = 1.0) -> None:
        self._schedule = schedule
        self._callback = callback
        self._interval = interval
        self._handle: TimerHandle | None = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    def sync(self, fasting: bool) -> None:
        """Start ticking on entry to Fasting, stop on exit."""
        if fasting:
            if self._handle is None:
                self._callback()
                self._handle = self._schedule(self._interval, self._callback)
        else:
            self.stop()

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.stop()
            self._handle = None
