"""Main CLI entry point for the game conformance harness."""

import asyncio
import logging
import os
from contextlib import nullcontext
from datetime import datetime
from functools import partial
from pathlib import Path
from typing import NoReturn, Optional
from urllib.parse import urlparse

# Suppress per-request INFO lines from httpx during the readiness probe
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import ConformanceConfig
from ..constants import DEFAULT_BASE_URL
from ..descriptors import GameDescriptor, load_descriptors, select_descriptors
from ..exceptions import DescriptorError, ServerUnavailableError
from ..harness import ConformanceSuite, SuiteReport
from ..session import SUPPORTED_BROWSERS, SessionFactory
from .config import BASE_URL_ENV, BROWSER_ENV, DEFAULT_DESCRIPTORS_PATH, RESULTS_ROOT, UI_MODES
from .probe import wait_for_server
from .results import ResultsManager
from .runners import run_all_plain, run_all_quiet
from .server import StaticServer

EXIT_CONFORMANT = 0
EXIT_NON_CONFORMANT = 1
EXIT_USAGE = 2

app = typer.Typer(help="Run black-box conformance scenarios against daily browser games")
console = Console()


@app.command()
def run(
    keys: Optional[list[str]] = typer.Argument(
        None,
        help="Game keys to run (default: every descriptor)",
    ),
    descriptors: Path = typer.Option(
        Path(DEFAULT_DESCRIPTORS_PATH),
        "--descriptors",
        help="Path to a descriptor JSON file or a directory of them",
    ),
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        help=f"Base URL that relative entry URLs resolve against (default: {DEFAULT_BASE_URL})",
    ),
    serve: Optional[Path] = typer.Option(
        None,
        "--serve",
        help="Serve this directory on the base URL's port for the duration of the run",
    ),
    browser: Optional[str] = typer.Option(
        None,
        "--browser",
        help="Browser engine: chromium, firefox, webkit (default: chromium)",
    ),
    headed: bool = typer.Option(
        False,
        "--headed",
        help="Show the browser window",
    ),
    max_concurrent_games: Optional[int] = typer.Option(
        None,
        "--max-concurrent-games",
        help="Maximum number of games tested in parallel",
    ),
    scenario_timeout: Optional[float] = typer.Option(
        None,
        "--scenario-timeout",
        help="Ceiling in seconds for a single scenario",
    ),
    ui: str = typer.Option(
        "plain",
        "--ui",
        help="UI mode: plain (streaming verdicts), quiet (progress bar + summary only)",
    ),
    results_dir: Path = typer.Option(
        Path(RESULTS_ROOT),
        "--results-dir",
        help="Root directory for saved reports",
    ),
    no_save: bool = typer.Option(
        False,
        "--no-save",
        help="Do not write JSON reports",
    ),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env-file",
        help="Path to .env file",
    ),
) -> None:
    """Run the conformance battery against the selected games."""
    # Load environment
    load_dotenv(override=False)
    if env_file:
        if not env_file.exists():
            _usage_error(f"Env file not found: {env_file}")
        load_dotenv(env_file, override=True)

    if ui not in UI_MODES:
        _usage_error(f"Unsupported UI mode '{ui}'. Supported: {', '.join(UI_MODES)}")

    resolved_browser = browser or os.getenv(BROWSER_ENV, "chromium")
    if resolved_browser not in SUPPORTED_BROWSERS:
        _usage_error(
            f"Unsupported browser '{resolved_browser}'. Supported: {', '.join(SUPPORTED_BROWSERS)}"
        )

    selected = _load_selected(descriptors, keys)

    config_overrides: dict = {
        "base_url": base_url or os.getenv(BASE_URL_ENV, DEFAULT_BASE_URL),
    }
    if max_concurrent_games is not None:
        config_overrides["max_concurrent_games"] = max_concurrent_games
    if scenario_timeout is not None:
        config_overrides["scenario_timeout_ms"] = int(scenario_timeout * 1000)
    try:
        config = ConformanceConfig(**config_overrides)
    except ValueError as exc:
        _usage_error(str(exc))

    server_context = nullcontext()
    if serve is not None:
        try:
            server_context = _static_server_for(serve, config.base_url)
        except ValueError as exc:
            _usage_error(str(exc))

    run_name = f"run_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
    results_manager: Optional[ResultsManager] = None
    run_dir: Optional[Path] = None
    if not no_save:
        results_manager = ResultsManager(results_dir)
        run_dir = results_manager.create_run_dir(run_name)

    try:
        with server_context:
            report = asyncio.run(
                run_conformance(
                    descriptors=selected,
                    config=config,
                    ui_mode=ui,
                    browser=resolved_browser,
                    headed=headed,
                    run_name=run_name,
                    results_manager=results_manager,
                    run_dir=run_dir,
                )
            )
    except ServerUnavailableError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(EXIT_USAGE)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        raise typer.Exit(130)
    except Exception as exc:
        console.print(f"[red]Fatal error:[/red] {escape(f'{type(exc).__name__}: {exc}')}")
        raise typer.Exit(EXIT_USAGE)

    raise typer.Exit(EXIT_CONFORMANT if report.passed else EXIT_NON_CONFORMANT)


@app.command("list")
def list_games(
    descriptors: Path = typer.Option(
        Path(DEFAULT_DESCRIPTORS_PATH),
        "--descriptors",
        help="Path to a descriptor JSON file or a directory of them",
    ),
) -> None:
    """List the games described by the descriptor source."""
    games = _load_selected(descriptors, None)

    table = Table(title=f"Game descriptors ({len(games)})")
    table.add_column("Key")
    table.add_column("Name")
    table.add_column("Entry URL")
    table.add_column("Signals")
    table.add_column("Recipe", justify="right")
    table.add_column("Score persistence")

    for game in games:
        persistence = "game over only" if game.persistence.game_over_only else "required"
        table.add_row(
            escape(game.key),
            escape(game.name),
            escape(game.entry_url),
            escape(", ".join(signal.label for signal in game.rendered_signals)),
            str(len(game.recipe)),
            persistence,
        )

    console.print(table)


async def run_conformance(
    descriptors: list[GameDescriptor],
    config: ConformanceConfig,
    ui_mode: str,
    browser: str,
    headed: bool,
    run_name: str,
    results_manager: Optional[ResultsManager] = None,
    run_dir: Optional[Path] = None,
) -> SuiteReport:
    """Probe the server, start the browser and run the selected UI mode."""
    await wait_for_server(config.base_url, on_retry=_report_probe_retry)

    async with create_session_factory(browser, headed) as factory:
        screenshot_path = None
        if results_manager is not None and run_dir is not None:
            screenshot_path = partial(results_manager.screenshot_path, run_dir)
        suite = ConformanceSuite(descriptors, config, factory, screenshot_path=screenshot_path)
        console.print(
            f"[dim]Testing {len(descriptors)} game(s) at {escape(config.base_url)} with {browser}[/dim]"
        )
        if run_dir is not None:
            console.print(f"[dim]Results directory: {run_dir}[/dim]\n")

        runner = run_all_quiet if ui_mode == "quiet" else run_all_plain
        return await runner(
            suite,
            console=console,
            run_name=run_name,
            results_manager=results_manager,
            run_dir=run_dir,
        )


def create_session_factory(browser: str, headed: bool) -> SessionFactory:
    """Build the Playwright-backed factory; imported lazily so `list` works without browsers."""
    from ..session.playwright_adapter import PlaywrightSessionFactory

    return PlaywrightSessionFactory(browser_name=browser, headless=not headed)


def _load_selected(path: Path, keys: Optional[list[str]]) -> list[GameDescriptor]:
    try:
        return select_descriptors(load_descriptors(path), keys)
    except (DescriptorError, ValueError, OSError) as exc:
        _usage_error(str(exc))


def _static_server_for(directory: Path, base_url: str) -> StaticServer:
    parsed = urlparse(base_url)
    if parsed.scheme != "http" or not parsed.hostname:
        raise ValueError(f"--serve needs an http:// base URL, got {base_url}")
    return StaticServer(directory, host=parsed.hostname, port=parsed.port or 80)


def _report_probe_retry(attempt: int, exc: Exception, delay: float) -> None:
    console.print(
        f"[yellow]Warning:[/yellow] game server not ready ({escape(str(exc))}); "
        f"retry {attempt} in {delay:.1f}s"
    )


def _usage_error(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(EXIT_USAGE)


if __name__ == "__main__":
    app()
