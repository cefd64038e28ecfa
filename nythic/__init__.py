"""Nythic - session lifecycle and chapter ordering for the student platform."""

__version__ = "0.1.0"
