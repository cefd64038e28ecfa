"""Single-active-device session checks and the session conflict dialog."""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from nythic.session.logout import SessionStore

DEVICE_CONFLICT_REASON = "Session invalidated - logged in on another device"


@dataclass(frozen=True)
class SessionCheck:
    """Result of validating a session id."""

    valid: bool
    reason: str | None = None

    @property
    def evicted(self) -> bool:
        """True when another device took over the session."""
        return not self.valid and self.reason == DEVICE_CONFLICT_REASON


class ProfileDirectory(Protocol):
    """Lookups against the auth/persistence service."""

    def user_for_token(self, token: str) -> str | None:
        """Return the user id for an auth token, or None if invalid."""
        ...

    def role_for(self, user_id: str) -> str | None:
        """Return the user's role (e.g. "student", "admin")."""
        ...

    def active_session_for(self, user_id: str) -> str | None:
        """Return the recorded active session id, or None if not tracked."""
        ...


class SessionValidator:
    """Checks that a student's session is the one active session on record."""

    def __init__(self, profiles: ProfileDirectory) -> None:
        self._profiles = profiles

    def validate(self, token: str | None, session_id: str | None) -> SessionCheck:
        """Validate a session.

        Args:
            token: Auth token from the request.
            session_id: Session id stored on this device.

        Returns:
            SessionCheck. Lookup failures yield an invalid check carrying
            the error text.
        """
        if not token:
            return SessionCheck(valid=False, reason="No authorization header")

        try:
            user_id = self._profiles.user_for_token(token)
            if user_id is None:
                return SessionCheck(valid=False, reason="Invalid auth token")

            if not session_id:
                return SessionCheck(valid=False, reason="No session ID provided")

            # Only students are restricted to one device
            if self._profiles.role_for(user_id) != "student":
                return SessionCheck(valid=True)

            active_session_id = self._profiles.active_session_for(user_id)
        except Exception as e:
            print(f"[Conflict] Session validation failed: {e}")
            return SessionCheck(valid=False, reason=str(e) or "Unknown error")

        # Session tracking not set up yet for this student
        if not active_session_id:
            return SessionCheck(valid=True)

        if active_session_id == session_id:
            return SessionCheck(valid=True)
        return SessionCheck(valid=False, reason=DEVICE_CONFLICT_REASON)


class SessionConflictDialog:
    """Tells the user another device signed in, offers "Sign In Again".

    Independent of the inactivity monitor: it opens only on eviction and its
    one action routes to re-authentication.
    """

    title = "You've Been Logged Out"
    message = (
        "Your account was signed in on another device. For security reasons, "
        "only one device can be active at a time."
    )
    action_label = "Sign In Again"

    def __init__(self, on_sign_in: Callable[[], None]) -> None:
        self._on_sign_in = on_sign_in
        self._open = False
        self._reason: str | None = None
        self._lock = threading.Lock()

    @property
    def open(self) -> bool:
        with self._lock:
            return self._open

    @property
    def reason(self) -> str | None:
        with self._lock:
            return self._reason

    def notify_evicted(self, reason: str = DEVICE_CONFLICT_REASON) -> None:
        """Open the dialog. Repeated signals while open are ignored."""
        with self._lock:
            if self._open:
                return
            self._open = True
            self._reason = reason
        print(f"[Conflict] {reason}")

    def sign_in(self) -> None:
        """Close the dialog and route to re-authentication."""
        with self._lock:
            if not self._open:
                return
            self._open = False
        self._on_sign_in()


class SessionWatcher:
    """Runs session checks and opens the conflict dialog on eviction."""

    def __init__(
        self,
        validator: SessionValidator,
        dialog: SessionConflictDialog,
        store: SessionStore,
    ) -> None:
        self._validator = validator
        self._dialog = dialog
        self._store = store

    def check(self, token: str | None) -> SessionCheck:
        result = self._validator.validate(token, self._store.get())
        if result.evicted:
            self._store.clear()
            self._dialog.notify_evicted(result.reason or DEVICE_CONFLICT_REASON)
        return result
