"""Console observer for streaming suite execution."""

from typing import Optional

from rich.console import Console
from rich.markup import escape

from ...descriptors import GameDescriptor
from ...harness import GameReport
from ...runtime import StatusLevel, SuiteObserver
from ...scenarios import Verdict, VerdictStatus


class ConsoleObserver(SuiteObserver):
    """Observer that prints scenario progress and verdicts using Rich."""

    def __init__(self, console: Optional[Console] = None, show_errors: bool = True):
        """Initialize console observer.

        Args:
            console: Rich console instance (created if not provided)
            show_errors: Print the collected page errors under failing verdicts
        """
        self.console = console or Console()
        self.show_errors = show_errors

    async def on_scenario_start(self, descriptor: GameDescriptor, scenario: str) -> None:
        self.console.print(f"[dim][{escape(descriptor.key)}] {scenario}...[/dim]")

    async def on_verdict(self, descriptor: GameDescriptor, verdict: Verdict) -> None:
        prefix = f"[bold][{escape(descriptor.key)}][/bold] {verdict.scenario}"
        timing = f"[dim]({verdict.elapsed_ms}ms)[/dim]"

        if verdict.status == VerdictStatus.PASS:
            self.console.print(f"{prefix} [green]✓ pass[/green] {timing}")
        elif verdict.status == VerdictStatus.WARN:
            self.console.print(f"{prefix} [yellow]! warn[/yellow] {timing}")
        else:
            kind = verdict.failure_kind.value if verdict.failure_kind else "fail"
            self.console.print(
                f"{prefix} [bold red]✗ {kind}:[/bold red] "
                f"{escape(verdict.unmet_condition or '')} {timing}"
            )
            if verdict.screenshot:
                self.console.print(f"    [dim]Screenshot: {escape(verdict.screenshot)}[/dim]")

        for warning in verdict.warnings:
            self.console.print(f"    [yellow]Warning:[/yellow] {escape(warning)}")

        if self.show_errors and not verdict.passed:
            for entry in verdict.errors:
                self.console.print(f"    [red]{entry.kind.value}:[/red] {escape(entry.message[:200])}")

    async def on_game_complete(self, report: GameReport) -> None:
        name = escape(report.descriptor.display_name)
        if report.conformant:
            self.console.print(f"[bold green]✓ {name} conformant[/bold green]")
        else:
            failed = ", ".join(verdict.scenario for verdict in report.failures)
            self.console.print(f"[bold red]✗ {name} non-conformant[/bold red] ({failed})")

    async def on_status(self, message: str, level: StatusLevel | str = StatusLevel.INFO) -> None:
        """Display status message."""
        level = StatusLevel(level)
        if level == StatusLevel.ERROR:
            self.console.print(f"[bold red]Error:[/bold red] {escape(message)}")
        elif level == StatusLevel.WARNING:
            self.console.print(f"[yellow]Warning:[/yellow] {escape(message)}")
        else:
            self.console.print(f"[dim]{escape(message)}[/dim]")
