"""Viewport portability: the game survives a small touch-device viewport."""

from __future__ import annotations

from ..config import ConformanceConfig, Viewport
from ..descriptors import Action, ActionKind, GameDescriptor, Point
from ..exceptions import ConditionFailed
from ..session import SessionOptions
from .base import FailureKind, Scenario, ScenarioContext
from .render import check_rendered

DEFAULT_TAP_Y = 300


def touch_action(descriptor: GameDescriptor, viewport: Viewport) -> Action:
    """First tap of the recipe, else its first click as a tap, else a centred tap."""
    action = descriptor.first_pointer_action()
    if action is not None:
        return action.as_tap()
    return Action(
        ActionKind.TAP,
        position=Point(x=viewport.width // 2, y=min(DEFAULT_TAP_Y, viewport.height - 1)),
    )


class ViewportPortability(Scenario):
    """Resize, reload, tap once, then require a clean log and the render condition.

    When the session has no touch support the tap is replaced by a click on
    the same target and the verdict carries a warning naming the substitution.
    """

    name = "viewport"
    title = "game works on mobile viewport"
    failure_kind = FailureKind.PORTABILITY

    def session_options(self, config: ConformanceConfig) -> SessionOptions:
        return SessionOptions(
            viewport=config.desktop_viewport,
            has_touch=config.mobile_has_touch,
            action_timeout_ms=config.action_timeout_ms,
        )

    async def execute(self, ctx: ScenarioContext) -> None:
        viewport = ctx.config.mobile_viewport
        session = ctx.session

        await session.resize(viewport.width, viewport.height)
        await session.reload(ctx.config.settle)
        await ctx.settle()

        tap = touch_action(ctx.descriptor, viewport)
        if session.has_touch:
            await ctx.perform(tap)
        else:
            click = tap.as_click()
            ctx.warn(
                f"touch input unavailable; '{tap.describe()}' was delivered as "
                f"'{click.describe()}'"
            )
            await ctx.perform(click)

        try:
            await check_rendered(ctx)
        except ConditionFailed as exc:
            raise ConditionFailed(f"after resize to {viewport}: {exc.condition}") from exc
