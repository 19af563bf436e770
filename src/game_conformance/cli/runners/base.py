"""Shared helpers for suite runners."""

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ...harness import SuiteReport
from ...scenarios import VerdictStatus
from ..results import ResultsManager

_STATUS_CELLS = {
    VerdictStatus.PASS: "[green]PASS[/green]",
    VerdictStatus.WARN: "[yellow]WARN[/yellow]",
    VerdictStatus.FAIL: "[red]FAIL[/red]",
}


def build_summary_table(report: SuiteReport, scenario_names: list[str]) -> Table:
    """One row per game, one column per scenario."""
    table = Table(title="Conformance Results", show_lines=False)
    table.add_column("Game")
    for name in scenario_names:
        table.add_column(name, justify="center")
    table.add_column("Result")

    for game in report:
        cells = []
        for name in scenario_names:
            verdict = game.verdict_for(name)
            if verdict is None:
                cells.append("-")
            elif verdict.is_timeout:
                cells.append("[magenta]TIMEOUT[/magenta]")
            else:
                cells.append(_STATUS_CELLS[verdict.status])
        result = "[bold green]conformant[/bold green]" if game.conformant else "[bold red]non-conformant[/bold red]"
        table.add_row(escape(game.descriptor.display_name), *cells, result)

    return table


def print_summary(console: Console, report: SuiteReport, scenario_names: list[str]) -> None:
    console.print("\n")
    console.rule("[bold]Summary[/bold]")
    console.print(build_summary_table(report, scenario_names))

    summary = report.summary()
    console.print(f"\nGames: {summary['games']}")
    console.print(f"Conformant: [green]{summary['conformant_games']}[/green]")
    console.print(f"Non-conformant: [red]{summary['games'] - summary['conformant_games']}[/red]")
    console.print(
        f"Scenarios: {summary['scenarios']} "
        f"([green]{summary['passed']} pass[/green], "
        f"[yellow]{summary['warned']} warn[/yellow], "
        f"[red]{summary['failed']} fail[/red])"
    )

    for game in report.failed_games():
        for verdict in game.failures:
            kind = verdict.failure_kind.value if verdict.failure_kind else "fail"
            console.print(
                f"[red]✗[/red] {escape(game.key)} {verdict.scenario} [dim]({kind})[/dim]: "
                f"{escape(verdict.unmet_condition or '')}"
            )


def persist_suite_report(
    results_manager: Optional[ResultsManager],
    run_dir: Optional[Path],
    report: SuiteReport,
    run_name: str,
    console: Console,
) -> Optional[Path]:
    """Write the per-game reports and manifest, if saving is enabled."""
    if results_manager is None or run_dir is None:
        return None
    manifest = results_manager.persist(run_dir, report, name=run_name)
    console.print(f"\n[dim]Results saved to: {run_dir}[/dim]\n")
    return manifest
