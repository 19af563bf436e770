"""Plain console mode runner with streaming output."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ...harness import ConformanceSuite, SuiteReport
from ..results import ResultsManager
from ..ui import ConsoleObserver
from .base import persist_suite_report, print_summary


async def run_all_plain(
    suite: ConformanceSuite,
    console: Console,
    run_name: str,
    results_manager: Optional[ResultsManager] = None,
    run_dir: Optional[Path] = None,
) -> SuiteReport:
    """Run the suite while streaming every scenario and verdict.

    Args:
        suite: Configured conformance suite
        console: Rich console instance
        run_name: Run name recorded in the manifest
        results_manager: Results manager, or None to skip saving
        run_dir: Run directory created by the results manager
    """
    suite.add_observer(ConsoleObserver(console=console))

    report = await suite.run()

    print_summary(console, report, [scenario.name for scenario in suite.scenarios])
    persist_suite_report(results_manager, run_dir, report, run_name, console)
    return report
