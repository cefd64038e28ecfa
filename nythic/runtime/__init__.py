"""Runtime wiring and configuration."""

from nythic.runtime.config import load_config
from nythic.runtime.session import SessionRuntime

__all__ = ["SessionRuntime", "load_config"]
