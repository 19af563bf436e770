"""Conformance suite orchestrator: every scenario against every game."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence
from typing import Optional

from ..config import ConformanceConfig
from ..descriptors import GameDescriptor
from ..runtime import ErrorCollector, StatusLevel, SuiteObserver
from ..scenarios import Scenario, ScenarioRunner, default_scenarios
from ..scenarios.base import FailureKind, ScreenshotPath, Verdict, VerdictStatus
from ..session import SessionFactory
from .report import GameReport, SuiteReport


class ConformanceSuite:
    """Runs the scenario battery across a set of game descriptors.

    Games run in parallel, bounded by ``config.max_concurrent_games``. The
    scenarios of one game run sequentially in a fixed order since they share
    the game's storage origin. Nothing aborts early: a failing scenario never
    stops later scenarios or sibling games.

    ```python
    async with PlaywrightSessionFactory() as factory:
        suite = ConformanceSuite(descriptors, ConformanceConfig(), factory)
        suite.add_observer(ConsoleObserver(console))
        report = await suite.run()
    ```
    """

    def __init__(
        self,
        descriptors: Sequence[GameDescriptor],
        config: ConformanceConfig,
        session_factory: SessionFactory,
        scenarios: Optional[Sequence[Scenario]] = None,
        screenshot_path: Optional[ScreenshotPath] = None,
    ):
        self.descriptors = list(descriptors)
        self.config = config
        self.session_factory = session_factory
        self.scenarios: list[Scenario] = (
            list(scenarios) if scenarios is not None else default_scenarios()
        )
        self.observers: list[SuiteObserver] = []
        self.screenshot_path = screenshot_path

        names = [scenario.name for scenario in self.scenarios]
        if len(set(names)) != len(names):
            raise ValueError(f"Scenario names must be unique, got {names}")

    def add_observer(self, observer: SuiteObserver) -> None:
        self.observers.append(observer)

    async def run(self) -> SuiteReport:
        start_time = time.perf_counter()
        await self._status(
            f"Running {len(self.scenarios)} scenarios against {len(self.descriptors)} game(s) "
            f"at {self.config.base_url}"
        )

        runner = ScenarioRunner(
            self.session_factory,
            self.config,
            collector=ErrorCollector(),
            observers=self.observers,
            screenshot_path=self.screenshot_path,
        )
        semaphore = asyncio.Semaphore(self.config.max_concurrent_games)
        tasks = [
            self._run_game(descriptor, runner, semaphore)
            for descriptor in self.descriptors
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        game_reports: list[GameReport] = []
        for descriptor, result in zip(self.descriptors, results):
            if isinstance(result, GameReport):
                game_reports.append(result)
                continue
            if not isinstance(result, Exception):
                raise result
            report = self._crashed_report(descriptor, result)
            await self._status(
                f"{descriptor.key}: pipeline crashed: {type(result).__name__}: {result}",
                StatusLevel.ERROR,
            )
            for observer in self.observers:
                await observer.on_game_complete(report)
            game_reports.append(report)

        return SuiteReport(
            game_reports=game_reports,
            base_url=self.config.base_url,
            elapsed_ms=int((time.perf_counter() - start_time) * 1000),
        )

    async def _run_game(
        self,
        descriptor: GameDescriptor,
        runner: ScenarioRunner,
        semaphore: asyncio.Semaphore,
    ) -> GameReport:
        async with semaphore:
            start_time = time.perf_counter()
            report = GameReport(descriptor=descriptor)
            for scenario in self.scenarios:
                report.verdicts.append(await runner.run(scenario, descriptor))
            report.elapsed_ms = int((time.perf_counter() - start_time) * 1000)

            for observer in self.observers:
                await observer.on_game_complete(report)
            return report

    def _crashed_report(self, descriptor: GameDescriptor, exc: BaseException) -> GameReport:
        condition = f"game pipeline crashed: {type(exc).__name__}: {exc}"
        return GameReport(
            descriptor=descriptor,
            verdicts=[
                Verdict(
                    scenario=scenario.name,
                    status=VerdictStatus.FAIL,
                    failure_kind=FailureKind.HARNESS,
                    unmet_condition=condition,
                )
                for scenario in self.scenarios
            ],
        )

    async def _status(self, message: str, level: StatusLevel = StatusLevel.INFO) -> None:
        for observer in self.observers:
            await observer.on_status(message, level)
