"""Suite runners for different UI modes."""

from .plain import run_all_plain
from .quiet import run_all_quiet

__all__ = ["run_all_plain", "run_all_quiet"]
