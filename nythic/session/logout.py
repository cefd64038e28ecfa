"""Logout handling with retry and forced local session clear."""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol


class SessionStore(Protocol):
    """Local storage for the active session id."""

    def get(self) -> str | None: ...

    def set(self, session_id: str) -> None: ...

    def clear(self) -> None: ...


class MemorySessionStore:
    """In-process session id storage."""

    def __init__(self, session_id: str | None = None) -> None:
        self._session_id = session_id
        self._lock = threading.Lock()

    def get(self) -> str | None:
        with self._lock:
            return self._session_id

    def set(self, session_id: str) -> None:
        with self._lock:
            self._session_id = session_id

    def clear(self) -> None:
        with self._lock:
            self._session_id = None


@dataclass
class LogoutConfig:
    """Logout retry configuration."""

    max_retries: int = 3
    retry_delay_ms: int = 1000
    notice: str = "You have been logged out due to inactivity"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LogoutConfig":
        """Create from dictionary."""
        return cls(
            max_retries=max(int(data.get("max_retries", 3)), 1),
            retry_delay_ms=int(data.get("retry_delay_ms", 1000)),
            notice=data.get("notice", "You have been logged out due to inactivity"),
        )


class LogoutHandler:
    """Signs the user out, falling back to a forced local clear.

    Intended as the inactivity monitor's on_logout callback. The local
    session id is cleared before the remote sign-out is attempted, so it
    is gone even if sign_out keeps failing or hangs.
    """

    def __init__(
        self,
        sign_out: Callable[[], None],
        store: SessionStore,
        config: LogoutConfig | None = None,
        on_signed_out: Callable[[bool], None] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the handler.

        Args:
            sign_out: Invalidates the session with the auth service. May raise.
            store: Local session id storage.
            config: Retry configuration.
            on_signed_out: Called afterwards with forced=True if every
                sign-out attempt failed.
            sleep: Used to wait between attempts.
        """
        self._sign_out = sign_out
        self._store = store
        self.config = config or LogoutConfig()
        self._on_signed_out = on_signed_out
        self._sleep = sleep

    def __call__(self) -> bool:
        """Sign out.

        Returns:
            True if the auth service confirmed the sign-out, False if the
            local session had to be cleared without it.
        """
        print(f"[Logout] {self.config.notice}")
        self._store.clear()
        signed_out = self._sign_out_with_retry()

        if not signed_out:
            print("[Logout] Remote sign-out failed, local session cleared")

        if self._on_signed_out is not None:
            self._on_signed_out(not signed_out)
        return signed_out

    def _sign_out_with_retry(self) -> bool:
        attempts = self.config.max_retries
        for attempt in range(attempts):
            try:
                self._sign_out()
                return True
            except Exception as e:
                print(f"[Logout] Sign-out attempt {attempt + 1}/{attempts} failed: {e}")
                if attempt < attempts - 1:
                    self._sleep(self.config.retry_delay_ms / 1000)
        return False
