"""Load integrity: the page loads and settles without a single error."""

from __future__ import annotations

from .base import FailureKind, Scenario, ScenarioContext


class LoadIntegrity(Scenario):
    """Pure smoke test. Any recorded error is a hard fail, no tolerance."""

    name = "load"
    title = "game loads without errors"
    failure_kind = FailureKind.LOAD

    async def execute(self, ctx: ScenarioContext) -> None:
        # Navigation and the bounded settle window already ran in prepare();
        # the runner fails the verdict on a non-empty error log.
        return None
