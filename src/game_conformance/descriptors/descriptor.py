"""Game descriptor data structures loaded from JSON descriptor files."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from ..exceptions import DescriptorError

DEFAULT_CONTAINER_SELECTOR = '[id*="game"], [class*="game"], #root'
DEFAULT_SCORE_KEYWORDS = ("score", "high", "best", "record")


class SignalKind(str, Enum):
    """Ways a game can prove that it rendered."""

    CANVAS = "canvas"
    CONTAINER = "container"
    TEXT = "text"

    @classmethod
    def from_string(cls, value: str) -> "SignalKind":
        normalized = value.lower().strip()
        aliases = {
            "canvas": cls.CANVAS,
            "drawing_surface": cls.CANVAS,
            "container": cls.CONTAINER,
            "root": cls.CONTAINER,
            "dom": cls.CONTAINER,
            "text": cls.TEXT,
            "body_text": cls.TEXT,
        }
        if normalized not in aliases:
            raise DescriptorError(
                f"Unsupported rendered signal: '{value}'. "
                f"Supported: canvas, container (root/dom), text (body_text)"
            )
        return aliases[normalized]


class ActionKind(str, Enum):
    """Primitive interactions a recipe is built from."""

    CLICK = "click"
    KEY = "key"
    TYPE = "type"
    DRAG = "drag"
    TAP = "tap"

    @classmethod
    def from_string(cls, value: str) -> "ActionKind":
        normalized = value.lower().strip().replace("-", "_")
        aliases = {
            "click": cls.CLICK,
            "click_at": cls.CLICK,
            "key": cls.KEY,
            "key_press": cls.KEY,
            "press": cls.KEY,
            "type": cls.TYPE,
            "type_text": cls.TYPE,
            "drag": cls.DRAG,
            "pointer_drag": cls.DRAG,
            "swipe": cls.DRAG,
            "tap": cls.TAP,
            "touch_tap": cls.TAP,
        }
        if normalized not in aliases:
            raise DescriptorError(
                f"Unsupported action kind: '{value}'. "
                f"Supported: click, key, type, drag, tap"
            )
        return aliases[normalized]


@dataclass(frozen=True)
class Point:
    """Viewport coordinate in CSS pixels."""

    x: float
    y: float


@dataclass(frozen=True)
class RenderedSignal:
    """One acceptable proof that the game rendered.

    Attributes:
        kind (SignalKind): Which rendering strategy the signal checks.
        selector (Optional[str]): CSS selector override. ``canvas`` defaults to
            ``canvas`` and ``container`` to a game/root naming convention. Not
            used for ``text``.
    """

    kind: SignalKind
    selector: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind == SignalKind.TEXT and self.selector:
            raise DescriptorError("RenderedSignal of kind 'text' does not take a selector.")

    @property
    def effective_selector(self) -> str:
        if self.selector:
            return self.selector
        if self.kind == SignalKind.CANVAS:
            return "canvas"
        if self.kind == SignalKind.CONTAINER:
            return DEFAULT_CONTAINER_SELECTOR
        return "body"

    @property
    def label(self) -> str:
        if self.selector:
            return f"{self.kind.value} ({self.selector})"
        return self.kind.value


@dataclass(frozen=True)
class Action:
    """Single primitive of an interaction recipe.

    Attributes:
        kind (ActionKind): Primitive type.
        selector (Optional[str]): Target element for ``click`` / ``tap``.
        position (Optional[Point]): Target coordinate for ``click`` / ``tap``.
            Relative to the selector's element when both are given, otherwise
            relative to the viewport.
        key (Optional[str]): Key name for ``key`` (e.g. ``Space``, ``ArrowUp``).
        text (Optional[str]): Text for ``type``.
        start (Optional[Point]): Drag origin.
        end (Optional[Point]): Drag destination.
        steps (int): Intermediate pointer moves for ``drag``.
        delay_ms (Optional[int]): Override for the inter-action settle delay
            that follows this action.
    """

    kind: ActionKind
    selector: Optional[str] = None
    position: Optional[Point] = None
    key: Optional[str] = None
    text: Optional[str] = None
    start: Optional[Point] = None
    end: Optional[Point] = None
    steps: int = 10
    delay_ms: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind in (ActionKind.CLICK, ActionKind.TAP):
            if not self.selector and self.position is None:
                raise DescriptorError(
                    f"Action '{self.kind.value}' requires a selector, a position, or both."
                )
        elif self.kind == ActionKind.KEY:
            if not self.key or not self.key.strip():
                raise DescriptorError("Action 'key' requires a non-empty key name.")
        elif self.kind == ActionKind.TYPE:
            if not self.text:
                raise DescriptorError("Action 'type' requires non-empty text.")
        elif self.kind == ActionKind.DRAG:
            if self.start is None or self.end is None:
                raise DescriptorError("Action 'drag' requires both start and end points.")
            if self.steps < 1:
                raise DescriptorError("Action 'drag' requires steps >= 1.")
        if self.delay_ms is not None and self.delay_ms < 0:
            raise DescriptorError("Action delay_ms cannot be negative.")

    @property
    def is_pointer(self) -> bool:
        return self.kind in (ActionKind.CLICK, ActionKind.TAP)

    def as_tap(self) -> "Action":
        """Return the same pointer target expressed as a touch tap."""
        if not self.is_pointer:
            raise ValueError(f"Cannot convert '{self.kind.value}' action to a tap")
        return Action(
            kind=ActionKind.TAP,
            selector=self.selector,
            position=self.position,
            delay_ms=self.delay_ms,
        )

    def as_click(self) -> "Action":
        """Return the same pointer target expressed as a mouse click."""
        if not self.is_pointer:
            raise ValueError(f"Cannot convert '{self.kind.value}' action to a click")
        return Action(
            kind=ActionKind.CLICK,
            selector=self.selector,
            position=self.position,
            delay_ms=self.delay_ms,
        )

    def describe(self) -> str:
        if self.kind in (ActionKind.CLICK, ActionKind.TAP):
            target = self.selector or "viewport"
            if self.position is not None:
                target += f"@({self.position.x:g},{self.position.y:g})"
            return f"{self.kind.value} {target}"
        if self.kind == ActionKind.KEY:
            return f"key {self.key}"
        if self.kind == ActionKind.TYPE:
            return f"type {self.text!r}"
        if self.start is None or self.end is None:
            return "drag"
        return (
            f"drag ({self.start.x:g},{self.start.y:g})"
            f" -> ({self.end.x:g},{self.end.y:g})"
        )


@dataclass(frozen=True)
class PersistenceRule:
    """How score persistence is recognised for a game.

    Attributes:
        keywords (Sequence[str]): Case-insensitive substrings; a storage key
            matching any of them counts as score-related.
        game_over_only (bool): The game only writes its score on a terminal
            game-over event the generic recipe cannot reliably reach. A
            keyword miss is then advisory instead of a failure.
    """

    keywords: Sequence[str] = DEFAULT_SCORE_KEYWORDS
    game_over_only: bool = False

    def __post_init__(self) -> None:
        if not self.keywords:
            raise DescriptorError("PersistenceRule.keywords cannot be empty.")
        if any(not keyword or not keyword.strip() for keyword in self.keywords):
            raise DescriptorError("PersistenceRule.keywords cannot contain blank entries.")

    def matches(self, storage_key: str) -> bool:
        lowered = storage_key.lower()
        return any(keyword.lower() in lowered for keyword in self.keywords)

    def matching_keys(self, storage_keys: Sequence[str]) -> list[str]:
        return sorted(key for key in storage_keys if self.matches(key))


@dataclass(frozen=True)
class GameDescriptor:
    """Declarative test surface of one published game.

    Attributes:
        key (str): Stable identifier (publication date or slug). Must be non-empty.
        entry_url (str): Entry page, absolute or relative to the suite base URL.
        name (str): Display name.
        title_fragments (Sequence[str]): Case-sensitive fragments the rendered
            page must contain. May be empty.
        rendered_signals (Sequence[RenderedSignal]): Acceptable render proofs;
            at least one must hold.
        recipe (Sequence[Action]): Minimal interaction that takes the game out
            of its menu state.
        persistence (PersistenceRule): Score-key predicate and strictness.
        stress_keys (Sequence[str]): Keys cycled during the stress key burst.
    """

    key: str
    entry_url: str
    name: str = ""
    title_fragments: Sequence[str] = ()
    rendered_signals: Sequence[RenderedSignal] = (
        RenderedSignal(SignalKind.CANVAS),
        RenderedSignal(SignalKind.CONTAINER),
    )
    recipe: Sequence[Action] = (Action(ActionKind.CLICK, selector="body"),)
    persistence: PersistenceRule = field(default_factory=PersistenceRule)
    stress_keys: Sequence[str] = ("Space",)

    def __post_init__(self) -> None:
        if not self.key or not self.key.strip():
            raise DescriptorError(
                "GameDescriptor.key cannot be empty. "
                "Use the publication date or a slug."
            )
        if not self.entry_url or not self.entry_url.strip():
            raise DescriptorError(f"Game '{self.key}' has an empty entry_url.")
        if not self.rendered_signals:
            raise DescriptorError(
                f"Game '{self.key}' must declare at least one rendered signal."
            )
        if not self.stress_keys:
            raise DescriptorError(f"Game '{self.key}' must declare at least one stress key.")

        # Freeze sequence fields so a descriptor cannot be mutated through a list alias.
        object.__setattr__(self, "title_fragments", tuple(self.title_fragments))
        object.__setattr__(self, "rendered_signals", tuple(self.rendered_signals))
        object.__setattr__(self, "recipe", tuple(self.recipe))
        object.__setattr__(self, "stress_keys", tuple(self.stress_keys))
        object.__setattr__(
            self,
            "persistence",
            PersistenceRule(
                keywords=tuple(self.persistence.keywords),
                game_over_only=self.persistence.game_over_only,
            ),
        )
        if not self.name:
            object.__setattr__(self, "name", self.key)

    @property
    def display_name(self) -> str:
        if self.name and self.name != self.key:
            return f"{self.key} {self.name}"
        return self.key

    def first_pointer_action(self) -> Optional[Action]:
        """Return the first tap in the recipe, else the first click, else None."""
        for action in self.recipe:
            if action.kind == ActionKind.TAP:
                return action
        for action in self.recipe:
            if action.kind == ActionKind.CLICK:
                return action
        return None
