"""The conformance battery, in its fixed execution order."""

from .base import (
    FailureKind,
    Scenario,
    ScenarioContext,
    ScenarioRunner,
    Verdict,
    VerdictStatus,
)
from .interaction import InputResponsiveness, RapidInteractionStress
from .load import LoadIntegrity
from .persistence import PersistenceProbe
from .render import RenderPresence, check_rendered
from .viewport import ViewportPortability


def default_scenarios() -> list[Scenario]:
    """Load -> Render -> Input -> Stress -> Portability -> Persistence."""
    return [
        LoadIntegrity(),
        RenderPresence(),
        InputResponsiveness(),
        RapidInteractionStress(),
        ViewportPortability(),
        PersistenceProbe(),
    ]


SCENARIO_NAMES = tuple(scenario.name for scenario in default_scenarios())

__all__ = [
    "FailureKind",
    "InputResponsiveness",
    "LoadIntegrity",
    "PersistenceProbe",
    "RapidInteractionStress",
    "RenderPresence",
    "SCENARIO_NAMES",
    "Scenario",
    "ScenarioContext",
    "ScenarioRunner",
    "Verdict",
    "VerdictStatus",
    "ViewportPortability",
    "check_rendered",
    "default_scenarios",
]
