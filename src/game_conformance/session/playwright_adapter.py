"""Playwright-backed implementation of the browser session capability."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager, contextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Iterator, Optional

from playwright.async_api import Browser, ConsoleMessage, Error as PlaywrightError, Page, Playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from ..config import SettlePolicy, Viewport
from ..descriptors import Action
from ..exceptions import SessionTimeoutError
from .adapter import SUPPORTED_BROWSERS, BrowserSession, ErrorCallback, SessionFactory, SessionOptions


_STORAGE_ROUND_TRIP_JS = """([key, value]) => {
  try {
    localStorage.setItem(key, value);
    const readBack = localStorage.getItem(key);
    localStorage.removeItem(key);
    const afterDelete = localStorage.getItem(key);
    return readBack === value && afterDelete === null;
  } catch (e) {
    return false;
  }
}"""

_STORAGE_KEYS_JS = "() => Object.keys(window.localStorage)"


@contextmanager
def _bounded(operation: str, timeout_ms: float) -> Iterator[None]:
    """Translate Playwright timeouts into harness timeouts."""
    try:
        yield
    except PlaywrightTimeoutError as exc:
        raise SessionTimeoutError(operation, timeout_ms) from exc


def _position(action: Action) -> Optional[dict[str, float]]:
    if action.position is None:
        return None
    return {"x": action.position.x, "y": action.position.y}


class PlaywrightSession(BrowserSession):
    """Browser session wrapping one Playwright page."""

    def __init__(self, page: Page, options: SessionOptions):
        self.page = page
        self.options = options
        self._viewport = options.viewport
        self._listeners: list[tuple[str, Any]] = []

    @property
    def has_touch(self) -> bool:
        return self.options.has_touch

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    async def navigate(self, url: str, policy: SettlePolicy) -> None:
        with _bounded(f"navigation to {url}", policy.navigation_timeout_ms):
            await self.page.goto(url, wait_until="load", timeout=policy.navigation_timeout_ms)

    async def reload(self, policy: SettlePolicy) -> None:
        with _bounded("reload", policy.navigation_timeout_ms):
            await self.page.reload(wait_until="load", timeout=policy.navigation_timeout_ms)

    async def wait_for_settle(self, policy: SettlePolicy) -> None:
        with _bounded("network idle", policy.network_idle_timeout_ms):
            await self.page.wait_for_load_state(
                "networkidle", timeout=policy.network_idle_timeout_ms
            )
        await self.sleep(policy.settle_window_ms)

    async def resize(self, width: int, height: int) -> None:
        with _bounded(f"resize to {width}x{height}", self.options.action_timeout_ms):
            await self.page.set_viewport_size({"width": width, "height": height})
        self._viewport = Viewport(width, height)

    async def click(self, action: Action) -> None:
        timeout = self.options.action_timeout_ms
        if not action.selector and action.position is None:
            raise ValueError(f"{action.describe()} needs a selector or a position")
        with _bounded(action.describe(), timeout):
            if action.selector:
                await self.page.locator(action.selector).first.click(
                    position=_position(action), timeout=timeout
                )
            else:
                await self.page.mouse.click(action.position.x, action.position.y)

    async def tap(self, action: Action) -> None:
        timeout = self.options.action_timeout_ms
        if not action.selector and action.position is None:
            raise ValueError(f"{action.describe()} needs a selector or a position")
        with _bounded(action.describe(), timeout):
            if action.selector:
                await self.page.locator(action.selector).first.tap(
                    position=_position(action), timeout=timeout
                )
            else:
                await self.page.touchscreen.tap(action.position.x, action.position.y)

    async def key_press(self, key: str) -> None:
        with _bounded(f"key {key}", self.options.action_timeout_ms):
            await self.page.keyboard.press(key)

    async def type_text(self, text: str) -> None:
        with _bounded(f"type {text!r}", self.options.action_timeout_ms):
            await self.page.keyboard.type(text)

    async def drag(self, action: Action) -> None:
        if action.start is None or action.end is None:
            raise ValueError("drag action needs a start and an end point")
        mouse = self.page.mouse
        with _bounded(action.describe(), self.options.action_timeout_ms):
            await mouse.move(action.start.x, action.start.y)
            await mouse.down()
            await mouse.move(action.end.x, action.end.y, steps=action.steps)
            await mouse.up()

    async def query_count(self, selector: str) -> int:
        with _bounded(f"count of {selector}", self.options.action_timeout_ms):
            return await self.page.locator(selector).count()

    async def read_text(self, scope: str = "body") -> str:
        timeout = self.options.action_timeout_ms
        with _bounded(f"text of {scope}", timeout):
            if scope == "title":
                return await self.page.title()
            return await self.page.text_content(scope, timeout=timeout) or ""

    async def storage_round_trip(self, key: str, value: str) -> bool:
        try:
            with _bounded("storage round-trip", self.options.action_timeout_ms):
                return bool(await self.page.evaluate(_STORAGE_ROUND_TRIP_JS, [key, value]))
        except SessionTimeoutError:
            raise
        except PlaywrightError:
            return False

    async def list_storage_keys(self) -> set[str]:
        with _bounded("storage key listing", self.options.action_timeout_ms):
            return set(await self.page.evaluate(_STORAGE_KEYS_JS))

    def on_uncaught_error(self, callback: ErrorCallback) -> None:
        def handler(error: PlaywrightError) -> None:
            callback(error.message or str(error))

        self.page.on("pageerror", handler)
        self._listeners.append(("pageerror", handler))

    def on_console_error(self, callback: ErrorCallback) -> None:
        def handler(message: ConsoleMessage) -> None:
            if message.type == "error":
                callback(message.text)

        self.page.on("console", handler)
        self._listeners.append(("console", handler))

    def remove_listeners(self) -> None:
        for event, handler in self._listeners:
            self.page.remove_listener(event, handler)
        self._listeners.clear()

    async def sleep(self, ms: float) -> None:
        if ms > 0:
            await asyncio.sleep(ms / 1000)

    async def screenshot(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with _bounded(f"screenshot to {path.name}", self.options.action_timeout_ms):
            await self.page.screenshot(path=str(path), timeout=self.options.action_timeout_ms)


class PlaywrightSessionFactory(SessionFactory):
    """Launches one browser and hands out a fresh context per session.

    ```python
    async with PlaywrightSessionFactory(browser_name="chromium") as factory:
        async with factory.open(SessionOptions(viewport=Viewport(1280, 720))) as session:
            await session.navigate("http://localhost:8080/games/2026-02-20/index.html", policy)
    ```
    """

    def __init__(self, browser_name: str = "chromium", headless: bool = True):
        if browser_name not in SUPPORTED_BROWSERS:
            raise ValueError(
                f"Unsupported browser: '{browser_name}'. "
                f"Supported: {', '.join(SUPPORTED_BROWSERS)}"
            )
        self.browser_name = browser_name
        self.headless = headless
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> "PlaywrightSessionFactory":
        await self.start()
        return self

    async def start(self) -> Browser:
        async with self._lock:
            if self._browser is None:
                self._playwright = await async_playwright().start()
                launcher = getattr(self._playwright, self.browser_name)
                self._browser = await launcher.launch(headless=self.headless)
            return self._browser

    @asynccontextmanager
    async def open(self, options: SessionOptions) -> AsyncIterator[BrowserSession]:
        browser = await self.start()
        context = await browser.new_context(
            viewport={"width": options.viewport.width, "height": options.viewport.height},
            has_touch=options.has_touch,
        )
        try:
            page = await context.new_page()
            page.set_default_timeout(options.action_timeout_ms)
            session = PlaywrightSession(page, options)
            try:
                yield session
            finally:
                session.remove_listeners()
        finally:
            await context.close()

    async def close(self) -> None:
        async with self._lock:
            if self._browser is not None:
                await self._browser.close()
                self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
