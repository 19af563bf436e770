"""Quiet mode runner that only displays aggregate progress."""

import asyncio
from contextlib import suppress
from pathlib import Path
from typing import Optional

from rich.console import Console
from tqdm import tqdm

from ...harness import ConformanceSuite, SuiteReport
from ..results import ResultsManager
from ..ui import QuietObserver
from .base import persist_suite_report, print_summary

PROGRESS_DESCRIPTION = "Running conformance..."


async def run_all_quiet(
    suite: ConformanceSuite,
    console: Console,
    run_name: str,
    results_manager: Optional[ResultsManager] = None,
    run_dir: Optional[Path] = None,
) -> SuiteReport:
    """Run the suite with a progress bar and a final summary only."""
    total = len(suite.descriptors) * len(suite.scenarios)

    with tqdm(
        total=total,
        desc=PROGRESS_DESCRIPTION,
        unit="scenario",
        dynamic_ncols=True,
        leave=True,
    ) as progress_bar:
        progress_lock = asyncio.Lock()
        observer = QuietObserver(progress_bar=progress_bar, lock=progress_lock)
        suite.add_observer(observer)

        refresh_task = asyncio.create_task(
            _refresh_progress(progress_bar, observer, progress_lock)
        )
        try:
            report = await suite.run()
        finally:
            refresh_task.cancel()
            with suppress(asyncio.CancelledError):
                await refresh_task

    print_summary(console, report, [scenario.name for scenario in suite.scenarios])
    persist_suite_report(results_manager, run_dir, report, run_name, console)
    return report


async def _refresh_progress(
    progress_bar: tqdm,
    observer: QuietObserver,
    lock: asyncio.Lock,
    interval: float = 0.5,
) -> None:
    """Refresh tqdm description with active scenarios and pass/warn/fail totals."""
    try:
        while True:
            async with lock:
                progress_bar.set_description(f"{PROGRESS_DESCRIPTION} ({observer.describe()})")
                progress_bar.refresh()
            await asyncio.sleep(interval)
    except asyncio.CancelledError:
        pass
