"""Game Conformance - black-box conformance checks for daily browser games."""

__version__ = "0.1.0"

# Descriptors
from .descriptors import (
    Action,
    ActionKind,
    GameDescriptor,
    PersistenceRule,
    Point,
    RenderedSignal,
    SignalKind,
    load_descriptors,
    select_descriptors,
)

# Configuration
from .config import ConformanceConfig, SettlePolicy, StressPolicy, Viewport

# Browser session capability
from .session import BrowserSession, SessionFactory, SessionOptions

# Runtime: error collection and events
from .runtime import ErrorCollector, ErrorLog, NoOpObserver, SuiteObserver

# Scenarios and verdicts
from .scenarios import (
    FailureKind,
    Scenario,
    ScenarioRunner,
    Verdict,
    VerdictStatus,
    default_scenarios,
)

# Suite orchestration and reports
from .harness import ConformanceSuite, GameReport, SuiteReport

from .exceptions import (
    ConditionFailed,
    ConformanceError,
    DescriptorError,
    ServerUnavailableError,
    SessionTimeoutError,
)

__all__ = [
    "__version__",
    "Action",
    "ActionKind",
    "BrowserSession",
    "ConditionFailed",
    "ConformanceConfig",
    "ConformanceError",
    "ConformanceSuite",
    "DescriptorError",
    "ErrorCollector",
    "ErrorLog",
    "FailureKind",
    "GameDescriptor",
    "GameReport",
    "NoOpObserver",
    "PersistenceRule",
    "Point",
    "RenderedSignal",
    "Scenario",
    "ScenarioRunner",
    "ServerUnavailableError",
    "SessionFactory",
    "SessionOptions",
    "SessionTimeoutError",
    "SettlePolicy",
    "SignalKind",
    "StressPolicy",
    "SuiteObserver",
    "SuiteReport",
    "Verdict",
    "VerdictStatus",
    "Viewport",
    "default_scenarios",
    "load_descriptors",
    "select_descriptors",
]
