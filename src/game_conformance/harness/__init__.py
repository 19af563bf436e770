from .orchestrator import ConformanceSuite
from .report import GameReport, SuiteReport

__all__ = ["ConformanceSuite", "GameReport", "SuiteReport"]
