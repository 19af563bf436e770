"""Input responsiveness and rapid-interaction stress.

Both only assert crash-freedom. Visible state changes are game-specific and
not checked.
"""

from __future__ import annotations

from typing import Optional

from ..config import StressPolicy
from ..descriptors import Action, ActionKind, Point
from .base import FailureKind, Scenario, ScenarioContext


class InputResponsiveness(Scenario):
    name = "input"
    title = "game responds to user input"
    failure_kind = FailureKind.INTERACTION

    async def execute(self, ctx: ScenarioContext) -> None:
        await ctx.run_recipe()


class RapidInteractionStress(Scenario):
    """Bounded burst of pointer clicks then key presses, then a final settle.

    The recipe runs first so the burst lands on the game rather than its menu.
    """

    name = "stress"
    title = "game handles rapid interactions"
    failure_kind = FailureKind.INTERACTION

    def __init__(self, policy: Optional[StressPolicy] = None):
        self.policy = policy

    async def execute(self, ctx: ScenarioContext) -> None:
        policy = self.policy or ctx.config.stress
        session = ctx.session

        await ctx.run_recipe()

        for point in burst_points(policy, session.viewport.width, session.viewport.height):
            await session.click(Action(ActionKind.CLICK, position=point))
            await session.sleep(policy.interval_ms)

        keys = ctx.descriptor.stress_keys
        for index in range(policy.key_presses):
            await session.key_press(keys[index % len(keys)])
            await session.sleep(policy.interval_ms)

        await session.sleep(policy.final_settle_ms)


def burst_points(policy: StressPolicy, width: int, height: int) -> list[Point]:
    """Pointer targets for the stress burst, kept inside the viewport."""
    points = []
    for index in range(policy.pointer_events):
        x = policy.origin_x + index * policy.step_x
        y = policy.origin_y + (index % 3) * policy.step_y
        points.append(Point(x=min(x, width - 1), y=min(y, height - 1)))
    return points
