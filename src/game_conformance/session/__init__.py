"""Browser session capability and its Playwright implementation."""

from .adapter import (
    SUPPORTED_BROWSERS,
    BrowserSession,
    ErrorCallback,
    SessionFactory,
    SessionOptions,
    resolve_url,
)

__all__ = [
    "SUPPORTED_BROWSERS",
    "BrowserSession",
    "ErrorCallback",
    "SessionFactory",
    "SessionOptions",
    "resolve_url",
]
