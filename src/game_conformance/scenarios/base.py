"""Verdict model, scenario base class and the scenario runner."""

from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, ClassVar, Optional, Sequence

from ..config import ConformanceConfig
from ..descriptors import Action, GameDescriptor
from ..exceptions import ConditionFailed, SessionTimeoutError
from ..runtime import CollectorHandle, ErrorCollector, ErrorLog, SuiteObserver
from ..session import BrowserSession, SessionFactory, SessionOptions, resolve_url

# (game key, scenario name) -> file the failure screenshot is written to.
ScreenshotPath = Callable[[str, str], Path]


class VerdictStatus(str, Enum):
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


class FailureKind(str, Enum):
    """Why a scenario failed. ``timeout`` is kept apart from script errors."""

    LOAD = "load"
    RENDER = "render"
    INTERACTION = "interaction"
    PORTABILITY = "portability"
    PERSISTENCE = "persistence"
    TIMEOUT = "timeout"
    HARNESS = "harness"


@dataclass(frozen=True)
class Verdict:
    """Result of one scenario against one descriptor.

    Attributes:
        scenario: Scenario name, e.g. ``"render"``.
        status: pass, warn (pass-with-warning) or fail.
        failure_kind: Set only when status is fail.
        unmet_condition: Human-readable reason, set only when status is fail.
        errors: Error log accumulated while the scenario ran.
        warnings: Advisory notes (missed advisory checks, input fallbacks).
        elapsed_ms: Wall time of the scenario including session setup.
        screenshot: Path of the page screenshot captured on failure, if any.
    """

    scenario: str
    status: VerdictStatus
    failure_kind: Optional[FailureKind] = None
    unmet_condition: Optional[str] = None
    errors: ErrorLog = field(default_factory=ErrorLog)
    warnings: tuple[str, ...] = ()
    elapsed_ms: int = 0
    screenshot: Optional[str] = None

    def __post_init__(self) -> None:
        if self.status == VerdictStatus.FAIL:
            if self.failure_kind is None or not self.unmet_condition:
                raise ValueError(
                    f"Failed verdict for '{self.scenario}' needs a failure kind and an unmet condition"
                )
        elif self.failure_kind is not None:
            raise ValueError(f"Passing verdict for '{self.scenario}' cannot carry a failure kind")

    @property
    def passed(self) -> bool:
        return self.status != VerdictStatus.FAIL

    @property
    def is_timeout(self) -> bool:
        return self.failure_kind == FailureKind.TIMEOUT

    def to_dict(self) -> dict[str, Any]:
        return {
            "scenario": self.scenario,
            "status": self.status.value,
            "failure_kind": self.failure_kind.value if self.failure_kind else None,
            "unmet_condition": self.unmet_condition,
            "errors": self.errors.to_list(),
            "warnings": list(self.warnings),
            "elapsed_ms": self.elapsed_ms,
            "screenshot": self.screenshot,
        }


@dataclass
class ScenarioContext:
    """Everything a scenario body needs while it runs."""

    descriptor: GameDescriptor
    session: BrowserSession
    config: ConformanceConfig
    handle: CollectorHandle
    url: str
    warnings: list[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def errors(self) -> ErrorLog:
        return self.handle.snapshot()

    async def settle(self) -> None:
        await self.session.wait_for_settle(self.config.settle)

    async def perform(self, action: Action) -> None:
        """Run one primitive followed by its inter-action delay."""
        await self.session.perform(action)
        delay = action.delay_ms if action.delay_ms is not None else self.config.inter_action_delay_ms
        await self.session.sleep(delay)

    async def run_recipe(self, recipe: Optional[Sequence[Action]] = None) -> None:
        for action in self.descriptor.recipe if recipe is None else recipe:
            await self.perform(action)


class Scenario(ABC):
    """One named check of the conformance battery.

    Subclasses set ``name``, ``title`` and ``failure_kind`` and implement
    :meth:`execute`. Raise :class:`ConditionFailed` for an unmet condition.
    When ``requires_clean_log`` is set the runner fails the scenario if any
    error was recorded during the session.
    """

    name: ClassVar[str]
    title: ClassVar[str]
    failure_kind: ClassVar[FailureKind]
    requires_clean_log: ClassVar[bool] = True

    def session_options(self, config: ConformanceConfig) -> SessionOptions:
        return SessionOptions(
            viewport=config.desktop_viewport,
            action_timeout_ms=config.action_timeout_ms,
        )

    async def prepare(self, ctx: ScenarioContext) -> None:
        """Navigate to the entry URL and settle."""
        await ctx.session.navigate(ctx.url, ctx.config.settle)
        await ctx.settle()

    @abstractmethod
    async def execute(self, ctx: ScenarioContext) -> None:
        ...


class ScenarioRunner:
    """Runs one scenario against one descriptor inside an isolated session."""

    def __init__(
        self,
        session_factory: SessionFactory,
        config: ConformanceConfig,
        collector: Optional[ErrorCollector] = None,
        observers: Sequence[SuiteObserver] = (),
        screenshot_path: Optional[ScreenshotPath] = None,
    ):
        self.session_factory = session_factory
        self.config = config
        self.collector = collector or ErrorCollector()
        self.observers = list(observers)
        self.screenshot_path = screenshot_path

    async def run(self, scenario: Scenario, descriptor: GameDescriptor) -> Verdict:
        for observer in self.observers:
            await observer.on_scenario_start(descriptor, scenario.name)

        start_time = time.perf_counter()
        try:
            verdict = await self._run_in_session(scenario, descriptor, start_time)
        except Exception as exc:
            verdict = Verdict(
                scenario=scenario.name,
                status=VerdictStatus.FAIL,
                failure_kind=FailureKind.HARNESS,
                unmet_condition=f"browser session error: {type(exc).__name__}: {exc}",
                elapsed_ms=_elapsed_ms(start_time),
            )

        for observer in self.observers:
            await observer.on_verdict(descriptor, verdict)
        return verdict

    async def _run_in_session(
        self,
        scenario: Scenario,
        descriptor: GameDescriptor,
        start_time: float,
    ) -> Verdict:
        options = scenario.session_options(self.config)
        async with self.session_factory.open(options) as session:
            handle = self.collector.attach(session)
            ctx = ScenarioContext(
                descriptor=descriptor,
                session=session,
                config=self.config,
                handle=handle,
                url=resolve_url(self.config.base_url, descriptor.entry_url),
            )

            failure: Optional[tuple[FailureKind, str]] = None
            try:
                await asyncio.wait_for(
                    self._execute(scenario, ctx),
                    timeout=self.config.scenario_timeout_ms / 1000,
                )
            except ConditionFailed as exc:
                failure = (scenario.failure_kind, exc.condition)
            except SessionTimeoutError as exc:
                failure = (FailureKind.TIMEOUT, f"timeout: {exc}")
            except asyncio.TimeoutError:
                failure = (
                    FailureKind.TIMEOUT,
                    f"timeout: scenario exceeded {self.config.scenario_timeout_ms}ms",
                )
            except Exception as exc:
                failure = (scenario.failure_kind, f"{type(exc).__name__}: {exc}")
            finally:
                errors = self.collector.read_and_detach(handle)

            if failure is None and scenario.requires_clean_log and errors:
                failure = (
                    scenario.failure_kind,
                    f"expected 0 errors, found {len(errors)}: {errors.summary()}",
                )

            screenshot = None
            if failure is not None and self.screenshot_path is not None:
                path = self.screenshot_path(descriptor.key, scenario.name)
                screenshot = await self._capture_screenshot(ctx, path)

        if failure is not None:
            kind, condition = failure
            return Verdict(
                scenario=scenario.name,
                status=VerdictStatus.FAIL,
                failure_kind=kind,
                unmet_condition=condition,
                errors=errors,
                warnings=tuple(ctx.warnings),
                elapsed_ms=_elapsed_ms(start_time),
                screenshot=screenshot,
            )

        return Verdict(
            scenario=scenario.name,
            status=VerdictStatus.WARN if ctx.warnings else VerdictStatus.PASS,
            errors=errors,
            warnings=tuple(ctx.warnings),
            elapsed_ms=_elapsed_ms(start_time),
        )

    async def _execute(self, scenario: Scenario, ctx: ScenarioContext) -> None:
        await scenario.prepare(ctx)
        await scenario.execute(ctx)

    async def _capture_screenshot(self, ctx: ScenarioContext, path: Path) -> Optional[str]:
        """Save the failing page. A capture problem is recorded as a warning."""
        try:
            await asyncio.wait_for(
                ctx.session.screenshot(path),
                timeout=self.config.action_timeout_ms / 1000,
            )
        except asyncio.TimeoutError:
            ctx.warn(f"screenshot not captured: exceeded {self.config.action_timeout_ms}ms")
            return None
        except Exception as exc:
            ctx.warn(f"screenshot not captured: {type(exc).__name__}: {exc}")
            return None
        return str(path)


def _elapsed_ms(start_time: float) -> int:
    return int((time.perf_counter() - start_time) * 1000)
