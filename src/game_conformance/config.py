"""Timing policies and suite configuration."""

from __future__ import annotations

from dataclasses import dataclass, field

from .constants import (
    ACTION_TIMEOUT_MS,
    DEFAULT_BASE_URL,
    DESKTOP_VIEWPORT_HEIGHT,
    DESKTOP_VIEWPORT_WIDTH,
    INTER_ACTION_DELAY_MS,
    MAX_CONCURRENT_GAMES,
    MOBILE_HAS_TOUCH,
    MOBILE_VIEWPORT_HEIGHT,
    MOBILE_VIEWPORT_WIDTH,
    NAVIGATION_TIMEOUT_MS,
    NETWORK_IDLE_TIMEOUT_MS,
    PERSISTENCE_SETTLE_MS,
    SCENARIO_TIMEOUT_MS,
    SETTLE_WINDOW_MS,
    STORAGE_PROBE_KEY,
    STORAGE_PROBE_VALUE,
    STRESS_FINAL_SETTLE_MS,
    STRESS_INTERVAL_MS,
    STRESS_KEY_PRESSES,
    STRESS_POINTER_EVENTS,
)


@dataclass(frozen=True)
class SettlePolicy:
    """Bounded wait for asynchronous page activity to quiesce.

    Attributes:
        navigation_timeout_ms: Ceiling for the page load event.
        network_idle_timeout_ms: Ceiling for network quiescence after load.
        settle_window_ms: Fixed window after network idle during which
            script-driven rendering may still raise errors.
    """

    navigation_timeout_ms: int = NAVIGATION_TIMEOUT_MS
    network_idle_timeout_ms: int = NETWORK_IDLE_TIMEOUT_MS
    settle_window_ms: int = SETTLE_WINDOW_MS

    def __post_init__(self) -> None:
        for name in ("navigation_timeout_ms", "network_idle_timeout_ms", "settle_window_ms"):
            if getattr(self, name) < 0:
                raise ValueError(f"SettlePolicy.{name} cannot be negative")

    @property
    def ceiling_ms(self) -> int:
        """Worst-case time spent settling after the load event."""
        return self.network_idle_timeout_ms + self.settle_window_ms


@dataclass(frozen=True)
class StressPolicy:
    """Shape of the rapid-interaction burst."""

    pointer_events: int = STRESS_POINTER_EVENTS
    key_presses: int = STRESS_KEY_PRESSES
    interval_ms: int = STRESS_INTERVAL_MS
    final_settle_ms: int = STRESS_FINAL_SETTLE_MS
    origin_x: float = 100.0
    origin_y: float = 150.0
    step_x: float = 10.0
    step_y: float = 80.0

    def __post_init__(self) -> None:
        if self.pointer_events < 0 or self.key_presses < 0:
            raise ValueError("StressPolicy event counts cannot be negative")
        if self.interval_ms < 0 or self.final_settle_ms < 0:
            raise ValueError("StressPolicy delays cannot be negative")

    def scaled(self, factor: int) -> "StressPolicy":
        """Return a policy with both burst sizes multiplied by ``factor``."""
        return StressPolicy(
            pointer_events=self.pointer_events * factor,
            key_presses=self.key_presses * factor,
            interval_ms=self.interval_ms,
            final_settle_ms=self.final_settle_ms,
            origin_x=self.origin_x,
            origin_y=self.origin_y,
            step_x=self.step_x,
            step_y=self.step_y,
        )


@dataclass(frozen=True)
class Viewport:
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Viewport must be positive, got {self.width}x{self.height}")

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass
class ConformanceConfig:
    """Configuration for conformance suite execution."""

    base_url: str = DEFAULT_BASE_URL
    settle: SettlePolicy = field(default_factory=SettlePolicy)
    stress: StressPolicy = field(default_factory=StressPolicy)
    inter_action_delay_ms: int = INTER_ACTION_DELAY_MS
    action_timeout_ms: int = ACTION_TIMEOUT_MS
    scenario_timeout_ms: int = SCENARIO_TIMEOUT_MS
    desktop_viewport: Viewport = field(
        default_factory=lambda: Viewport(DESKTOP_VIEWPORT_WIDTH, DESKTOP_VIEWPORT_HEIGHT)
    )
    mobile_viewport: Viewport = field(
        default_factory=lambda: Viewport(MOBILE_VIEWPORT_WIDTH, MOBILE_VIEWPORT_HEIGHT)
    )
    mobile_has_touch: bool = MOBILE_HAS_TOUCH
    persistence_settle_ms: int = PERSISTENCE_SETTLE_MS
    storage_probe_key: str = STORAGE_PROBE_KEY
    storage_probe_value: str = STORAGE_PROBE_VALUE
    max_concurrent_games: int = MAX_CONCURRENT_GAMES

    def __post_init__(self) -> None:
        if self.max_concurrent_games < 1:
            raise ValueError("max_concurrent_games must be at least 1")
        if self.scenario_timeout_ms <= 0:
            raise ValueError("scenario_timeout_ms must be positive")
        if not self.storage_probe_key:
            raise ValueError("storage_probe_key cannot be empty")
