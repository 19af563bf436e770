"""Quiet observer - progress counters only, no streaming logs."""

import asyncio
from typing import Optional

from tqdm import tqdm

from ...descriptors import GameDescriptor
from ...harness import GameReport
from ...runtime import StatusLevel, SuiteObserver
from ...scenarios import Verdict


class QuietObserver(SuiteObserver):
    """Observer that only advances a shared tqdm bar and tallies verdicts."""

    def __init__(self, progress_bar: Optional[tqdm] = None, lock: Optional[asyncio.Lock] = None):
        self.progress_bar = progress_bar
        self.lock = lock or asyncio.Lock()
        self.active = 0
        self.counts = {"pass": 0, "warn": 0, "fail": 0}
        self._seen: dict[str, int] = {}

    async def on_scenario_start(self, descriptor: GameDescriptor, scenario: str) -> None:
        async with self.lock:
            self.active += 1

    async def on_verdict(self, descriptor: GameDescriptor, verdict: Verdict) -> None:
        async with self.lock:
            self.active = max(0, self.active - 1)
            self._seen[descriptor.key] = self._seen.get(descriptor.key, 0) + 1
            self._tally([verdict])

    async def on_game_complete(self, report: GameReport) -> None:
        # A crashed pipeline reports verdicts that never went through on_verdict.
        async with self.lock:
            seen = self._seen.get(report.key, 0)
            self._tally(report.verdicts[seen:])
            self._seen[report.key] = len(report.verdicts)

    async def on_status(self, message: str, level: StatusLevel | str = StatusLevel.INFO) -> None:
        """Suppress status output."""
        pass

    def describe(self) -> str:
        parts = []
        if self.active > 0:
            parts.append(f"{self.active} active")
        parts.append(f"pass {self.counts['pass']}")
        parts.append(f"warn {self.counts['warn']}")
        parts.append(f"fail {self.counts['fail']}")
        return " | ".join(parts)

    def _tally(self, verdicts: list[Verdict]) -> None:
        for verdict in verdicts:
            self.counts[verdict.status.value] += 1
        if verdicts and self.progress_bar is not None:
            self.progress_bar.update(len(verdicts))
