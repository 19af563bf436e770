"""Error collection for a single browser session."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Sequence

from ..session import BrowserSession


class ErrorKind(str, Enum):
    EXCEPTION = "exception"
    CONSOLE_ERROR = "console-error"


@dataclass(frozen=True)
class ErrorEntry:
    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


@dataclass(frozen=True)
class ErrorLog(Sequence[ErrorEntry]):
    """Ordered, immutable snapshot of the errors recorded for one session."""

    entries: tuple[ErrorEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ErrorEntry]:
        return iter(self.entries)

    def __getitem__(self, index):  # type: ignore[override]
        return self.entries[index]

    @property
    def exceptions(self) -> list[ErrorEntry]:
        return [entry for entry in self.entries if entry.kind == ErrorKind.EXCEPTION]

    @property
    def console_errors(self) -> list[ErrorEntry]:
        return [entry for entry in self.entries if entry.kind == ErrorKind.CONSOLE_ERROR]

    def summary(self, limit: int = 3) -> str:
        """Short human-readable digest used in unmet-condition messages."""
        shown = "; ".join(str(entry) for entry in self.entries[:limit])
        remaining = len(self.entries) - limit
        if remaining > 0:
            shown += f"; ... {remaining} more"
        return shown

    def to_list(self) -> list[dict[str, str]]:
        return [{"kind": entry.kind.value, "message": entry.message} for entry in self.entries]


@dataclass
class CollectorHandle:
    """Live attachment of an :class:`ErrorCollector` to a session."""

    session: BrowserSession
    entries: list[ErrorEntry] = field(default_factory=list)
    active: bool = True
    console_observed: bool = True

    def record(self, kind: ErrorKind, message: str) -> None:
        if self.active:
            self.entries.append(ErrorEntry(kind=kind, message=message))

    def snapshot(self) -> ErrorLog:
        return ErrorLog(tuple(self.entries))


class ErrorCollector:
    """Accumulates uncaught exceptions and console errors while attached.

    Uncaught exceptions must be observable. Console observation is
    best-effort: a session that cannot observe the console still gets a
    handle, with ``console_observed`` set to False.
    """

    def attach(self, session: BrowserSession) -> CollectorHandle:
        handle = CollectorHandle(session=session)
        session.on_uncaught_error(lambda message: handle.record(ErrorKind.EXCEPTION, message))
        try:
            session.on_console_error(
                lambda message: handle.record(ErrorKind.CONSOLE_ERROR, message)
            )
        except NotImplementedError:
            handle.console_observed = False
        return handle

    def read_and_detach(self, handle: CollectorHandle) -> ErrorLog:
        handle.active = False
        handle.session.remove_listeners()
        return handle.snapshot()
