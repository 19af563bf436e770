"""Browser session capability consumed by the harness.

The harness only depends on the interfaces in this module. A Playwright
implementation lives in :mod:`game_conformance.session.playwright_adapter`;
tests drive the harness with a scripted double.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from ..config import SettlePolicy, Viewport
from ..descriptors import Action

ErrorCallback = Callable[[str], None]

SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")


@dataclass(frozen=True)
class SessionOptions:
    """Per-session browser context options.

    Attributes:
        viewport: Initial viewport size.
        has_touch: Request touch input support from the context.
        action_timeout_ms: Ceiling for a single primitive (click, tap, drag).
    """

    viewport: Viewport
    has_touch: bool = False
    action_timeout_ms: int = 5000


class BrowserSession(ABC):
    """One browser context and page.

    Implementations must raise :class:`~game_conformance.exceptions.SessionTimeoutError`
    when a bounded wait elapses, so the harness can tell slow games from
    broken ones.
    """

    @property
    @abstractmethod
    def has_touch(self) -> bool:
        """Whether touch taps are delivered as real touch events."""

    @property
    @abstractmethod
    def viewport(self) -> Viewport:
        """Current viewport size."""

    @abstractmethod
    async def navigate(self, url: str, policy: SettlePolicy) -> None:
        """Load ``url`` and wait for the load event within the policy ceiling."""

    @abstractmethod
    async def reload(self, policy: SettlePolicy) -> None:
        """Reload the current page."""

    @abstractmethod
    async def wait_for_settle(self, policy: SettlePolicy) -> None:
        """Wait for network idle, then the fixed settle window."""

    @abstractmethod
    async def resize(self, width: int, height: int) -> None:
        ...

    @abstractmethod
    async def click(self, action: Action) -> None:
        ...

    @abstractmethod
    async def tap(self, action: Action) -> None:
        ...

    @abstractmethod
    async def key_press(self, key: str) -> None:
        ...

    @abstractmethod
    async def type_text(self, text: str) -> None:
        ...

    @abstractmethod
    async def drag(self, action: Action) -> None:
        ...

    @abstractmethod
    async def query_count(self, selector: str) -> int:
        """Number of elements matching a CSS selector."""

    @abstractmethod
    async def read_text(self, scope: str = "body") -> str:
        """Text content of ``body`` or the document ``title``."""

    @abstractmethod
    async def storage_round_trip(self, key: str, value: str) -> bool:
        """Write, read back, delete and re-read ``key`` in page-local storage.

        Returns True only if the read returned ``value`` and the read after
        delete returned nothing. Storage exceptions (blocked, quota) yield False.
        """

    @abstractmethod
    async def list_storage_keys(self) -> set[str]:
        ...

    @abstractmethod
    def on_uncaught_error(self, callback: ErrorCallback) -> None:
        """Register a callback for uncaught page exceptions."""

    @abstractmethod
    def on_console_error(self, callback: ErrorCallback) -> None:
        """Register a callback for console messages at error severity.

        Implementations that cannot observe the console raise NotImplementedError.
        """

    @abstractmethod
    def remove_listeners(self) -> None:
        """Detach every callback registered on this session."""

    @abstractmethod
    async def sleep(self, ms: float) -> None:
        """Suspend for ``ms`` milliseconds."""

    @abstractmethod
    async def screenshot(self, path: Path) -> None:
        """Write a PNG of the current page to ``path``."""

    async def perform(self, action: Action) -> None:
        """Dispatch one recipe primitive to the matching method."""
        kind = action.kind.value
        if kind == "click":
            await self.click(action)
        elif kind == "tap":
            await self.tap(action)
        elif kind == "key":
            if action.key is None:
                raise ValueError("key action needs a key")
            await self.key_press(action.key)
        elif kind == "type":
            if action.text is None:
                raise ValueError("type action needs text")
            await self.type_text(action.text)
        elif kind == "drag":
            await self.drag(action)
        else:
            raise ValueError(f"Unsupported action kind: {kind}")


class SessionFactory(ABC):
    """Creates isolated sessions; the context manager guarantees release."""

    @abstractmethod
    def open(self, options: SessionOptions) -> AbstractAsyncContextManager[BrowserSession]:
        ...

    async def close(self) -> None:
        """Release factory-wide resources (browser process). Optional."""
        return None

    async def __aenter__(self) -> "SessionFactory":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


def resolve_url(base_url: Optional[str], entry_url: str) -> str:
    """Resolve a descriptor entry URL against the suite base URL."""
    if "://" in entry_url or not base_url:
        return entry_url
    return base_url.rstrip("/") + "/" + entry_url.lstrip("/")
