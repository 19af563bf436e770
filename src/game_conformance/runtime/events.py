"""Observer pattern for conformance suite events."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..descriptors import GameDescriptor
    from ..harness.report import GameReport
    from ..scenarios.base import Verdict


class StatusLevel(str, Enum):
    """Status level for suite notifications."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class SuiteObserver(ABC):
    """Abstract base class for observing suite execution events.

    Implement this interface to receive notifications as scenarios start
    and verdicts land. Useful for:
    - Console and progress-bar output
    - Custom logging implementations
    - CI annotations
    """

    @abstractmethod
    async def on_scenario_start(self, descriptor: GameDescriptor, scenario: str) -> None:
        """Called before a scenario opens its session.

        Args:
            descriptor (GameDescriptor): Game under test.
            scenario (str): Scenario name, e.g. ``"load"``.
        """

    @abstractmethod
    async def on_verdict(self, descriptor: GameDescriptor, verdict: Verdict) -> None:
        """Called once per scenario with its final verdict."""

    @abstractmethod
    async def on_game_complete(self, report: GameReport) -> None:
        """Called when all scenarios of one game have a verdict."""

    @abstractmethod
    async def on_status(self, message: str, level: StatusLevel | str = StatusLevel.INFO) -> None:
        """Called for status updates during execution.

        Args:
            message (str): Human-readable status message.
            level: Severity - use StatusLevel enum or string ("info", "warning", "error").
        """


class NoOpObserver(SuiteObserver):
    """Observer that ignores all events."""

    async def on_scenario_start(self, descriptor: GameDescriptor, scenario: str) -> None:
        pass

    async def on_verdict(self, descriptor: GameDescriptor, verdict: Verdict) -> None:
        pass

    async def on_game_complete(self, report: GameReport) -> None:
        pass

    async def on_status(self, message: str, level: StatusLevel | str = StatusLevel.INFO) -> None:
        pass
