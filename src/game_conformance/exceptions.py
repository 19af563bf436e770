"""Exception types raised by the conformance harness."""

from __future__ import annotations


class ConformanceError(Exception):
    """Base class for all harness errors."""


class DescriptorError(ConformanceError, ValueError):
    """A game descriptor is malformed, or a descriptor source is invalid."""


class ConditionFailed(ConformanceError):
    """A scenario's pass condition does not hold.

    The message is the human-readable unmet condition recorded on the verdict.
    """

    def __init__(self, condition: str):
        super().__init__(condition)
        self.condition = condition


class SessionTimeoutError(ConformanceError):
    """A bounded wait inside the browser session elapsed."""

    def __init__(self, operation: str, timeout_ms: float):
        super().__init__(f"{operation} exceeded {int(timeout_ms)}ms")
        self.operation = operation
        self.timeout_ms = timeout_ms


class ServerUnavailableError(ConformanceError):
    """The game server did not answer the pre-flight probe."""
