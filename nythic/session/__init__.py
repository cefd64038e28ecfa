"""Session lifecycle: inactivity logout and single-device conflicts."""

from nythic.session.activity import ActivityEvent, ActivityHub
from nythic.session.conflict import SessionConflictDialog, SessionValidator, SessionWatcher
from nythic.session.logout import LogoutConfig, LogoutHandler, MemorySessionStore
from nythic.session.monitor import (
    InactivityConfig,
    InactivityMonitor,
    MonitorPhase,
    MonitorSnapshot,
)

__all__ = [
    "ActivityEvent",
    "ActivityHub",
    "InactivityConfig",
    "InactivityMonitor",
    "LogoutConfig",
    "LogoutHandler",
    "MemorySessionStore",
    "MonitorPhase",
    "MonitorSnapshot",
    "SessionConflictDialog",
    "SessionValidator",
    "SessionWatcher",
]
