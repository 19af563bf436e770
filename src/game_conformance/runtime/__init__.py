"""Runtime support: error collection and suite events."""

from .errors import CollectorHandle, ErrorCollector, ErrorEntry, ErrorKind, ErrorLog
from .events import NoOpObserver, StatusLevel, SuiteObserver

__all__ = [
    "CollectorHandle",
    "ErrorCollector",
    "ErrorEntry",
    "ErrorKind",
    "ErrorLog",
    "NoOpObserver",
    "StatusLevel",
    "SuiteObserver",
]
