"""UI components for the CLI."""

from .console_observer import ConsoleObserver
from .quiet_observer import QuietObserver

__all__ = ["ConsoleObserver", "QuietObserver"]
