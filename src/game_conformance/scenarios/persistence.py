"""Persistence probe: storage is reachable, and the game stores a score."""

from __future__ import annotations

from ..exceptions import ConditionFailed
from .base import FailureKind, Scenario, ScenarioContext


class PersistenceProbe(Scenario):
    """Two checks combined with AND.

    (a) A harness-owned key survives a write/read/delete round-trip and
    leaves the storage key count unchanged. Always a hard requirement.

    (b) After the recipe and a settle window, some storage key matches the
    descriptor's score keywords. A miss fails, unless the descriptor says
    the score is only written on game over, in which case the miss is
    recorded as an advisory warning.
    """

    name = "persistence"
    title = "localStorage high score works"
    failure_kind = FailureKind.PERSISTENCE
    requires_clean_log = False

    async def execute(self, ctx: ScenarioContext) -> None:
        session = ctx.session
        config = ctx.config
        probe_key = config.storage_probe_key

        before = await session.list_storage_keys()
        if not await session.storage_round_trip(probe_key, config.storage_probe_value):
            raise ConditionFailed(
                f"storage round-trip of {probe_key}={config.storage_probe_value!r} failed: "
                f"page-local storage is unreachable or blocked"
            )
        after = await session.list_storage_keys()
        if probe_key in after:
            raise ConditionFailed(f"storage probe key {probe_key!r} was not deleted")
        if len(after) != len(before):
            raise ConditionFailed(
                f"storage probe changed key count: expected {len(before)}, found {len(after)}"
            )

        await ctx.run_recipe()
        await session.sleep(config.persistence_settle_ms)

        rule = ctx.descriptor.persistence
        storage_keys = await session.list_storage_keys()
        if rule.matching_keys(sorted(storage_keys)):
            return

        keywords = ", ".join(rule.keywords)
        present = ", ".join(sorted(storage_keys)) or "none"
        message = (
            f"expected >=1 storage key matching ({keywords}), found 0 "
            f"(keys present: {present})"
        )
        if rule.game_over_only:
            ctx.warn(f"advisory: {message}; score is only persisted on game over")
            return
        raise ConditionFailed(message)
