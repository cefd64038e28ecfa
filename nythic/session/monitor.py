"""Inactivity session monitor: warning countdown, then forced logout."""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from nythic.session.activity import QUALIFYING_EVENTS, ActivityEvent, ActivitySource
from nythic.session.scheduler import Scheduler, ThreadingScheduler, TimerHandle


class MonitorPhase(Enum):
    """Inactivity monitor states."""

    ACTIVE = auto()  # No warning shown
    WARNING = auto()  # Countdown visible, waiting for acknowledgement
    EXPIRED = auto()  # Terminal, logout callback has fired


@dataclass
class InactivityConfig:
    """Configuration for the inactivity monitor."""

    total_timeout_ms: int = 30 * 60 * 1000  # Inactivity tolerated before logout
    warning_lead_ms: int = 2 * 60 * 1000  # Warning shown this long before logout

    def __post_init__(self) -> None:
        if self.total_timeout_ms <= 0:
            raise ValueError(f"total_timeout_ms must be positive: {self.total_timeout_ms}")
        if self.warning_lead_ms < 0:
            raise ValueError(f"warning_lead_ms must not be negative: {self.warning_lead_ms}")
        if self.warning_lead_ms >= self.total_timeout_ms:
            raise ValueError(
                f"warning_lead_ms ({self.warning_lead_ms}) must be less than "
                f"total_timeout_ms ({self.total_timeout_ms})"
            )

    @property
    def warning_delay_ms(self) -> int:
        """Inactivity before the warning appears."""
        return self.total_timeout_ms - self.warning_lead_ms

    @property
    def warning_seconds(self) -> int:
        """Countdown start value in whole seconds."""
        return self.warning_lead_ms // 1000

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InactivityConfig":
        """Create config from dictionary.

        Args:
            data: Configuration dictionary.

        Returns:
            InactivityConfig instance.

        Raises:
            ValueError: If the warning lead is not shorter than the timeout.
        """
        return cls(
            total_timeout_ms=int(data.get("total_timeout_ms", 30 * 60 * 1000)),
            warning_lead_ms=int(data.get("warning_lead_ms", 2 * 60 * 1000)),
        )


@dataclass(frozen=True)
class MonitorSnapshot:
    """What the presentation layer needs to render the warning."""

    phase: MonitorPhase
    show_warning: bool
    remaining_seconds: int


class InactivityMonitor:
    """Logs the user out after a period without qualifying input.

    Once the warning is showing, passive activity (mouse movement, key
    presses, ...) no longer resets the timer. Only dismiss_warning() does,
    so the user has to acknowledge the prompt to stay logged in.
    """

    COUNTDOWN_INTERVAL_S = 1.0

    def __init__(
        self,
        config: InactivityConfig,
        on_logout: Callable[[], None],
        scheduler: Scheduler | None = None,
        activity_source: ActivitySource | None = None,
        clock: Callable[[], float] = time.monotonic,
        on_change: Callable[[MonitorSnapshot], None] | None = None,
    ) -> None:
        """Initialize the monitor.

        Args:
            config: Timeout configuration.
            on_logout: Called exactly once when the logout deadline passes.
            scheduler: Timer provider (defaults to threading timers).
            activity_source: Source of input events, subscribed on start().
            clock: Returns the current time in seconds.
            on_change: Optional callback for every state or countdown change.
        """
        self.config = config
        self._on_logout = on_logout
        self._scheduler: Scheduler = scheduler or ThreadingScheduler()
        self._activity_source = activity_source
        self._clock = clock
        self._on_change = on_change

        self._phase = MonitorPhase.ACTIVE
        self._remaining_seconds = config.warning_seconds
        self._last_activity_at = clock()

        # Bumped on every reset so callbacks from a superseded cycle are dropped
        self._generation = 0
        self._warning_timer: TimerHandle | None = None
        self._logout_timer: TimerHandle | None = None
        self._countdown: TimerHandle | None = None

        self._started = False
        self._torn_down = False
        self._unsubscribe: Callable[[], None] | None = None
        self._lock = threading.Lock()

        # Set while no on_logout call is in progress
        self._expiry_done = threading.Event()
        self._expiry_done.set()
        self._expiry_thread: threading.Thread | None = None

    @property
    def phase(self) -> MonitorPhase:
        with self._lock:
            return self._phase

    @property
    def show_warning(self) -> bool:
        with self._lock:
            return self._phase == MonitorPhase.WARNING

    @property
    def remaining_seconds(self) -> int:
        with self._lock:
            return self._remaining_seconds

    @property
    def last_activity_at(self) -> float:
        with self._lock:
            return self._last_activity_at

    @property
    def is_running(self) -> bool:
        """True between start() and expiry or teardown."""
        with self._lock:
            return self._is_live()

    def snapshot(self) -> MonitorSnapshot:
        with self._lock:
            return self._snapshot()

    def start(self) -> None:
        """Subscribe to activity and schedule the first deadlines."""
        with self._lock:
            if self._started or self._torn_down:
                return
            self._started = True
            self._reset_timers()
            snapshot = self._snapshot()

        if self._activity_source is not None:
            unsubscribe = self._activity_source.subscribe(self.record_activity)
            with self._lock:
                if self._torn_down:
                    stale: Callable[[], None] | None = unsubscribe
                else:
                    self._unsubscribe = unsubscribe
                    stale = None
            if stale is not None:
                stale()

        print(
            f"[Session] Inactivity monitor started "
            f"(timeout {self.config.total_timeout_ms} ms, warning {self.config.warning_lead_ms} ms)"
        )
        self._notify(snapshot)

    def reset(self) -> None:
        """Cancel all pending timers and start a fresh inactivity cycle."""
        with self._lock:
            if not self._is_live():
                return
            self._reset_timers()
            snapshot = self._snapshot()
        self._notify(snapshot)

    def record_activity(self, event: ActivityEvent) -> None:
        """Handle a qualifying input event.

        Resets the timer while ACTIVE. Ignored while the warning is showing.

        Args:
            event: The observed input event.
        """
        if event not in QUALIFYING_EVENTS:
            return
        with self._lock:
            if not self._is_live() or self._phase != MonitorPhase.ACTIVE:
                return
            self._reset_timers()
            snapshot = self._snapshot()
        self._notify(snapshot)

    def dismiss_warning(self) -> None:
        """Explicit "stay logged in" acknowledgement.

        No-op once the session has expired or the monitor was torn down.
        """
        with self._lock:
            if not self._is_live():
                return
            was_warning = self._phase == MonitorPhase.WARNING
            self._reset_timers()
            snapshot = self._snapshot()
        if was_warning:
            print("[Session] Warning dismissed, session extended")
        self._notify(snapshot)

    def teardown(self) -> None:
        """Cancel every pending timer and stop listening for activity.

        If the logout deadline already fired on another thread, waits for
        that on_logout call to finish, so no logout runs after teardown()
        returns. Called from inside on_logout it returns immediately.
        """
        with self._lock:
            if self._torn_down:
                return
            self._torn_down = True
            self._generation += 1
            self._cancel_timers()
            unsubscribe = self._unsubscribe
            self._unsubscribe = None
            expiry_thread = self._expiry_thread

        if unsubscribe is not None:
            unsubscribe()

        if expiry_thread is not None and expiry_thread is not threading.current_thread():
            self._expiry_done.wait()

    def _is_live(self) -> bool:
        return self._started and not self._torn_down and self._phase != MonitorPhase.EXPIRED

    def _snapshot(self) -> MonitorSnapshot:
        return MonitorSnapshot(
            phase=self._phase,
            show_warning=self._phase == MonitorPhase.WARNING,
            remaining_seconds=self._remaining_seconds,
        )

    def _cancel_timers(self) -> None:
        for handle in (self._warning_timer, self._logout_timer, self._countdown):
            if handle is not None:
                handle.cancel()
        self._warning_timer = None
        self._logout_timer = None
        self._countdown = None

    def _reset_timers(self) -> None:
        """Cancel, re-stamp and reschedule. Caller holds the lock."""
        self._cancel_timers()
        self._generation += 1
        generation = self._generation

        self._last_activity_at = self._clock()
        self._phase = MonitorPhase.ACTIVE
        self._remaining_seconds = self.config.warning_seconds

        self._warning_timer = self._scheduler.call_later(
            self.config.warning_delay_ms / 1000,
            lambda: self._on_warning_due(generation),
        )
        self._logout_timer = self._scheduler.call_later(
            self.config.total_timeout_ms / 1000,
            lambda: self._on_logout_due(generation),
        )

    def _on_warning_due(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._phase != MonitorPhase.ACTIVE:
                return
            self._warning_timer = None
            self._phase = MonitorPhase.WARNING
            self._remaining_seconds = self.config.warning_seconds
            self._countdown = self._scheduler.call_every(
                self.COUNTDOWN_INTERVAL_S,
                lambda: self._on_countdown_tick(generation),
            )
            snapshot = self._snapshot()

        print(f"[Session] Inactivity warning, logout in {snapshot.remaining_seconds}s")
        self._notify(snapshot)

    def _on_countdown_tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._phase != MonitorPhase.WARNING:
                return
            if self._remaining_seconds <= 1:
                self._remaining_seconds = 0
                if self._countdown is not None:
                    self._countdown.cancel()
                    self._countdown = None
            else:
                self._remaining_seconds -= 1
            snapshot = self._snapshot()
        self._notify(snapshot)

    def _on_logout_due(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or not self._is_live():
                return
            self._logout_timer = None
            self._phase = MonitorPhase.EXPIRED
            self._remaining_seconds = 0
            self._cancel_timers()
            unsubscribe = self._unsubscribe
            self._unsubscribe = None
            snapshot = self._snapshot()
            self._expiry_thread = threading.current_thread()
            self._expiry_done.clear()

        try:
            if unsubscribe is not None:
                unsubscribe()

            print("[Session] Inactivity timeout reached, logging out")
            self._notify(snapshot)
            try:
                self._on_logout()
            except Exception as e:
                print(f"[Session] Logout callback failed: {e}")
        finally:
            self._expiry_done.set()

    def _notify(self, snapshot: MonitorSnapshot) -> None:
        if self._on_change is not None:
            self._on_change(snapshot)
