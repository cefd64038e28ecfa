"""Wires the session components together for one authenticated session."""

import threading
import uuid
from collections.abc import Callable
from typing import Any

from nythic.session.activity import ActivityHub
from nythic.session.conflict import (
    ProfileDirectory,
    SessionCheck,
    SessionConflictDialog,
    SessionValidator,
    SessionWatcher,
)
from nythic.session.logout import LogoutConfig, LogoutHandler, MemorySessionStore
from nythic.session.monitor import InactivityConfig, InactivityMonitor, MonitorSnapshot
from nythic.session.scheduler import Scheduler
from nythic.session.warning import WarningPrompt


class SessionRuntime:
    """One monitor, one logout handler and one conflict dialog per session."""

    def __init__(
        self,
        config: dict[str, Any],
        sign_out: Callable[[], None] | None = None,
        on_sign_in: Callable[[], None] | None = None,
        profiles: ProfileDirectory | None = None,
        scheduler: Scheduler | None = None,
        on_change: Callable[[MonitorSnapshot], None] | None = None,
    ) -> None:
        """Initialize the runtime.

        Args:
            config: Configuration dictionary (see load_config).
            sign_out: Invalidates the session with the auth service.
            on_sign_in: Routes to re-authentication after an eviction.
            profiles: Enables single-device checks when given.
            scheduler: Timer provider for the monitor.
            on_change: Forwarded monitor snapshots.
        """
        self.hub = ActivityHub()
        self.store = MemorySessionStore()
        self.signed_out = threading.Event()
        self._on_change = on_change
        self._last_prompt_open = False

        self.logout = LogoutHandler(
            sign_out=sign_out or self._local_sign_out,
            store=self.store,
            config=LogoutConfig.from_dict(config.get("logout", {})),
            on_signed_out=self._on_signed_out,
        )
        self.monitor = InactivityMonitor(
            InactivityConfig.from_dict(config.get("inactivity", {})),
            on_logout=self.logout,
            scheduler=scheduler,
            activity_source=self.hub,
            on_change=self._on_monitor_change,
        )
        self.conflict_dialog = SessionConflictDialog(on_sign_in=on_sign_in or self._sign_in_again)
        self._watcher: SessionWatcher | None = None
        if profiles is not None:
            self._watcher = SessionWatcher(SessionValidator(profiles), self.conflict_dialog, self.store)

    def start(self) -> None:
        """Record a session id for this device and start the monitor."""
        if self.store.get() is None:
            self.store.set(uuid.uuid4().hex)
        self.monitor.start()

    def stop(self) -> None:
        self.monitor.teardown()

    def on_input(self, event_name: str) -> bool:
        """Feed a host input event (e.g. "keydown") to the monitor."""
        return self.hub.emit_name(event_name)

    def stay_logged_in(self) -> None:
        self.monitor.dismiss_warning()

    def check_session(self, token: str | None) -> SessionCheck | None:
        """Run a single-device check. Returns None when checks are disabled."""
        if self._watcher is None:
            return None
        result = self._watcher.check(token)
        if result.evicted:
            self.monitor.teardown()
        return result

    def _on_monitor_change(self, snapshot: MonitorSnapshot) -> None:
        prompt = WarningPrompt.from_snapshot(snapshot)
        if prompt.open and not self._last_prompt_open:
            print(f"[Session] {prompt.title}: {prompt.message}")
        elif prompt.open and prompt.remaining_seconds <= 10:
            print(f"[Session] Logging out in {prompt.time_display}")
        self._last_prompt_open = prompt.open

        if self._on_change is not None:
            self._on_change(snapshot)

    def _on_signed_out(self, forced: bool) -> None:
        self.signed_out.set()

    def _local_sign_out(self) -> None:
        print("[Session] No auth service configured, clearing local session only")

    def _sign_in_again(self) -> None:
        print("[Session] Please sign in again.")
