"""Render presence: at least one declared render signal holds and the title shows."""

from __future__ import annotations

from ..descriptors import SignalKind
from ..exceptions import ConditionFailed
from .base import FailureKind, Scenario, ScenarioContext


async def check_rendered(ctx: ScenarioContext) -> None:
    """Raise ConditionFailed unless the descriptor's render condition holds.

    Signals are a union: canvas count, container count or non-empty body
    text, whichever the descriptor declares. Every signal is measured so
    the failure message can name each one. Title fragments are matched
    case-sensitively against the body text, falling back to the document
    title.
    """
    session = ctx.session
    descriptor = ctx.descriptor
    body_text = await session.read_text("body")

    observed: list[str] = []
    holds = False
    for signal in descriptor.rendered_signals:
        if signal.kind == SignalKind.TEXT:
            present = bool(body_text.strip())
            observed.append(f"text: {'non-empty' if present else 'empty'}")
        else:
            count = await session.query_count(signal.effective_selector)
            present = count > 0
            observed.append(f"{signal.label}: {count}")
        holds = holds or present

    if not holds:
        raise ConditionFailed(
            f"expected >=1 rendered signal, found 0 ({', '.join(observed)})"
        )

    if not descriptor.title_fragments:
        return

    missing = [fragment for fragment in descriptor.title_fragments if fragment not in body_text]
    if missing:
        document_title = await session.read_text("title")
        missing = [fragment for fragment in missing if fragment not in document_title]
    if missing:
        quoted = ", ".join(repr(fragment) for fragment in missing)
        raise ConditionFailed(
            f"expected title fragment(s) {quoted} in rendered text, not found"
        )


class RenderPresence(Scenario):
    """Canvas, DOM tree or plain text: the game declares which proofs count."""

    name = "render"
    title = "game renders core elements"
    failure_kind = FailureKind.RENDER
    requires_clean_log = False

    async def execute(self, ctx: ScenarioContext) -> None:
        await check_rendered(ctx)
