"""Shared test fixtures."""

from collections.abc import Callable, Iterator
from unittest.mock import MagicMock

import pytest

from nythic.session.activity import ActivityHub
from nythic.session.monitor import InactivityConfig, InactivityMonitor


class ManualHandle:
    """Timer handle driven by ManualScheduler."""

    def __init__(
        self, due: float, callback: Callable[[], None], interval: float | None, seq: int
    ) -> None:
        self.due = due
        self.callback = callback
        self.interval = interval
        self.seq = seq
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class ManualScheduler:
    """Deterministic scheduler with a simulated clock (seconds)."""

    def __init__(self) -> None:
        self.now = 0.0
        self._handles: list[ManualHandle] = []
        self._seq = 0

    def clock(self) -> float:
        return self.now

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> ManualHandle:
        return self._add(delay_s, callback, None)

    def call_every(self, interval_s: float, callback: Callable[[], None]) -> ManualHandle:
        return self._add(interval_s, callback, interval_s)

    @property
    def pending(self) -> list[ManualHandle]:
        return [h for h in self._handles if not h.cancelled]

    def advance_ms(self, ms: float) -> None:
        """Move the clock forward, firing due callbacks in order."""
        target = self.now + ms / 1000
        while True:
            due = [h for h in self.pending if h.due <= target + 1e-9]
            if not due:
                break
            handle = min(due, key=lambda h: (h.due, h.seq))
            self.now = handle.due
            if handle.interval is None:
                self._handles.remove(handle)
            else:
                handle.due += handle.interval
            handle.callback()
        self.now = target
        self._handles = self.pending

    def _add(
        self, delay_s: float, callback: Callable[[], None], interval: float | None
    ) -> ManualHandle:
        self._seq += 1
        handle = ManualHandle(self.now + delay_s, callback, interval, self._seq)
        self._handles.append(handle)
        return handle


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Create a manual scheduler starting at t=0."""
    return ManualScheduler()


@pytest.fixture
def hub() -> ActivityHub:
    return ActivityHub()


@pytest.fixture
def on_logout() -> MagicMock:
    return MagicMock()


@pytest.fixture
def short_config() -> InactivityConfig:
    """1 s timeout with the warning 400 ms before logout."""
    return InactivityConfig(total_timeout_ms=1000, warning_lead_ms=400)


@pytest.fixture
def monitor(
    short_config: InactivityConfig,
    on_logout: MagicMock,
    scheduler: ManualScheduler,
    hub: ActivityHub,
) -> Iterator[InactivityMonitor]:
    m = InactivityMonitor(
        short_config,
        on_logout=on_logout,
        scheduler=scheduler,
        activity_source=hub,
        clock=scheduler.clock,
    )
    yield m
    m.teardown()
