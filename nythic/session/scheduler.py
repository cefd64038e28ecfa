"""Timer scheduling for the session monitor."""

import threading
from collections.abc import Callable
from typing import Protocol


class TimerHandle(Protocol):
    """Handle to a scheduled callback."""

    @property
    def cancelled(self) -> bool:
        """Whether the handle has been cancelled."""
        ...

    def cancel(self) -> None:
        """Cancel the callback. Safe to call more than once."""
        ...


class Scheduler(Protocol):
    """Protocol for one-shot and repeating timers."""

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback once after delay_s seconds.

        Args:
            delay_s: Delay in seconds.
            callback: Function to call.

        Returns:
            Handle that cancels the pending call.
        """
        ...

    def call_every(self, interval_s: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback every interval_s seconds until cancelled.

        Args:
            interval_s: Interval in seconds.
            callback: Function to call.

        Returns:
            Handle that stops the repetition.
        """
        ...


class _OneShot:
    def __init__(self, delay_s: float, callback: Callable[[], None]) -> None:
        self._timer = threading.Timer(delay_s, callback)
        self._timer.daemon = True
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self) -> None:
        self._timer.start()

    def cancel(self) -> None:
        self._cancelled = True
        self._timer.cancel()


class _Repeating:
    """Re-arms a threading.Timer after every tick until cancelled."""

    def __init__(self, interval_s: float, callback: Callable[[], None]) -> None:
        self._interval = interval_s
        self._callback = callback
        self._timer: threading.Timer | None = None
        self._cancelled = False
        self._lock = threading.Lock()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._timer = threading.Timer(self._interval, self._tick)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _tick(self) -> None:
        if self._cancelled:
            return
        self._callback()
        self.start()


class ThreadingScheduler:
    """Scheduler backed by daemon threading.Timer instances."""

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle:
        handle = _OneShot(max(delay_s, 0.0), callback)
        handle.start()
        return handle

    def call_every(self, interval_s: float, callback: Callable[[], None]) -> TimerHandle:
        if interval_s <= 0:
            raise ValueError(f"Interval must be positive: {interval_s}")
        handle = _Repeating(interval_s, callback)
        handle.start()
        return handle
