"""Per-game and suite-wide conformance reports."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Optional, overload

from ..descriptors import GameDescriptor
from ..scenarios.base import FailureKind, Verdict, VerdictStatus


@dataclass
class GameReport:
    """All verdicts for one descriptor, in execution order.

    Attributes:
        descriptor: Game under test.
        verdicts: One verdict per scenario, in the suite's fixed order.
        elapsed_ms: Wall time for the whole game.
    """

    descriptor: GameDescriptor
    verdicts: list[Verdict] = field(default_factory=list)
    elapsed_ms: int = 0

    @property
    def key(self) -> str:
        return self.descriptor.key

    @property
    def conformant(self) -> bool:
        """Conformant iff every verdict passes; warnings are allowed."""
        return all(verdict.passed for verdict in self.verdicts)

    @property
    def failures(self) -> list[Verdict]:
        return [verdict for verdict in self.verdicts if not verdict.passed]

    @property
    def warnings(self) -> list[Verdict]:
        return [verdict for verdict in self.verdicts if verdict.status == VerdictStatus.WARN]

    def verdict_for(self, scenario: str) -> Optional[Verdict]:
        for verdict in self.verdicts:
            if verdict.scenario == scenario:
                return verdict
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.descriptor.key,
            "name": self.descriptor.name,
            "entry_url": self.descriptor.entry_url,
            "conformant": self.conformant,
            "elapsed_ms": self.elapsed_ms,
            "verdicts": [verdict.to_dict() for verdict in self.verdicts],
        }


@dataclass
class SuiteReport(Sequence[GameReport]):
    """Wrapper around game reports with summary helpers."""

    game_reports: list[GameReport]
    base_url: str = ""
    elapsed_ms: int = 0

    def __post_init__(self) -> None:
        self._game_reports = list(self.game_reports)

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._game_reports)

    def __iter__(self):  # pragma: no cover - trivial
        return iter(self._game_reports)

    @overload
    def __getitem__(self, index: int) -> GameReport: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[GameReport]: ...

    def __getitem__(self, index: int | slice) -> GameReport | Sequence[GameReport]:
        return self._game_reports[index]

    @property
    def passed(self) -> bool:
        return all(report.conformant for report in self._game_reports)

    def failed_games(self) -> list[GameReport]:
        return [report for report in self._game_reports if not report.conformant]

    def report_for(self, key: str) -> Optional[GameReport]:
        for report in self._game_reports:
            if report.key == key:
                return report
        return None

    def summary(self) -> dict[str, Any]:
        verdicts = [verdict for report in self._game_reports for verdict in report.verdicts]
        by_kind: dict[str, int] = {}
        for verdict in verdicts:
            if verdict.failure_kind is not None:
                kind = verdict.failure_kind.value
                by_kind[kind] = by_kind.get(kind, 0) + 1
        return {
            "games": len(self._game_reports),
            "conformant_games": sum(1 for report in self._game_reports if report.conformant),
            "scenarios": len(verdicts),
            "passed": sum(1 for v in verdicts if v.status == VerdictStatus.PASS),
            "warned": sum(1 for v in verdicts if v.status == VerdictStatus.WARN),
            "failed": sum(1 for v in verdicts if v.status == VerdictStatus.FAIL),
            "timeouts": by_kind.get(FailureKind.TIMEOUT.value, 0),
            "failures_by_kind": by_kind,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_url": self.base_url,
            "passed": self.passed,
            "elapsed_ms": self.elapsed_ms,
            "summary": self.summary(),
            "games": [report.to_dict() for report in self._game_reports],
        }
