"""Results persistence for conformance runs."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

from ..harness import GameReport, SuiteReport
from .config import RESULTS_ROOT, SCREENSHOTS_DIRNAME, SESSION_MANIFEST_FILENAME


def _safe_name(name: str, fallback: str) -> str:
    safe = "".join(c if c.isalnum() or c in "-_." else "_" for c in name)
    return safe.strip("_") or fallback


class ResultsManager:
    """Manages saving conformance reports under a results root."""

    def __init__(self, results_root: Union[str, Path] = RESULTS_ROOT):
        """Initialize results manager.

        Args:
            results_root: Root directory for results
        """
        self.results_root = Path(results_root)
        self.results_root.mkdir(parents=True, exist_ok=True)

    def create_run_dir(self, name: str) -> Path:
        """Create a new, uniquely named run directory.

        Args:
            name: Run name (will be sanitized)

        Returns:
            Path to run directory
        """
        safe_name = _safe_name(name, "run")

        counter = 1
        while True:
            dir_name = safe_name if counter == 1 else f"{safe_name}_{counter}"
            run_dir = self.results_root / dir_name
            if not run_dir.exists():
                run_dir.mkdir(parents=True)
                return run_dir
            counter += 1

    def screenshot_path(self, run_dir: Path, key: str, scenario: str) -> Path:
        """Where the failure screenshot of one scenario is written.

        Creates ``<run_dir>/screenshots`` on first use.
        """
        directory = run_dir / SCREENSHOTS_DIRNAME
        directory.mkdir(parents=True, exist_ok=True)
        return directory / f"{_safe_name(key, 'game')}-{_safe_name(scenario, 'scenario')}.png"

    def save_game_report(self, run_dir: Path, report: GameReport) -> Path:
        """Write one game's verdicts to ``<key>.json``."""
        artifact = report.to_dict()
        artifact["timestamp"] = datetime.now(timezone.utc).isoformat()

        filepath = run_dir / f"{_safe_name(report.key, 'game')}.json"
        with filepath.open("w", encoding="utf-8") as f:
            json.dump(artifact, f, indent=2, ensure_ascii=False)

        return filepath

    def save_run_manifest(
        self,
        run_dir: Path,
        suite_report: SuiteReport,
        files: dict[str, str],
        name: Optional[str] = None,
    ) -> Path:
        """Save the run manifest with per-game summaries.

        Args:
            run_dir: Run directory
            suite_report: Completed suite report
            files: Mapping of game key to its report file, relative to ``run_dir``
            name: Run name

        Returns:
            Path to manifest file
        """
        games: list[dict[str, Any]] = []
        for report in suite_report:
            entry: dict[str, Any] = {
                "key": report.key,
                "name": report.descriptor.name,
                "conformant": report.conformant,
                "file": files.get(report.key, ""),
            }
            failures = [
                f"{verdict.scenario}: {verdict.unmet_condition}" for verdict in report.failures
            ]
            if failures:
                entry["failures"] = failures
            screenshots = [
                str(Path(verdict.screenshot).relative_to(run_dir))
                for verdict in report.failures
                if verdict.screenshot and Path(verdict.screenshot).is_relative_to(run_dir)
            ]
            if screenshots:
                entry["screenshots"] = screenshots
            games.append(entry)

        manifest = {
            "run_name": name or run_dir.name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "base_url": suite_report.base_url,
            "passed": suite_report.passed,
            "summary": suite_report.summary(),
            "games": games,
        }

        manifest_path = run_dir / SESSION_MANIFEST_FILENAME
        with manifest_path.open("w", encoding="utf-8") as f:
            json.dump(manifest, f, indent=2, ensure_ascii=False)

        return manifest_path

    def persist(self, run_dir: Path, suite_report: SuiteReport, name: Optional[str] = None) -> Path:
        """Save every game report plus the manifest; return the manifest path."""
        files: dict[str, str] = {}
        for report in suite_report:
            path = self.save_game_report(run_dir, report)
            files[report.key] = str(path.relative_to(run_dir))
        return self.save_run_manifest(run_dir, suite_report, files, name=name)
