"""Command-line interface: ``game-conformance run`` and ``game-conformance list``."""

__all__ = [
    "main",
]
