"""Text for the inactivity warning prompt."""

from dataclasses import dataclass

from nythic.session.monitor import MonitorSnapshot


def format_remaining(seconds: int) -> str:
    """Format a countdown value for display.

    Args:
        seconds: Remaining whole seconds.

    Returns:
        "M:SS" when at least a minute remains, otherwise "N seconds".
    """
    seconds = max(int(seconds), 0)
    minutes, secs = divmod(seconds, 60)
    if minutes > 0:
        return f"{minutes}:{secs:02d}"
    return f"{secs} seconds"


@dataclass(frozen=True)
class WarningPrompt:
    """Renderable state of the "Session Timeout Warning" dialog."""

    open: bool
    remaining_seconds: int
    title: str = "Session Timeout Warning"
    action_label: str = "Stay Logged In"

    @property
    def time_display(self) -> str:
        return format_remaining(self.remaining_seconds)

    @property
    def message(self) -> str:
        return (
            "You've been inactive for a while. For security reasons, you will be "
            f"automatically logged out in {self.time_display}."
        )

    @classmethod
    def from_snapshot(cls, snapshot: MonitorSnapshot) -> "WarningPrompt":
        return cls(open=snapshot.show_warning, remaining_seconds=snapshot.remaining_seconds)
