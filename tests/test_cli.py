import json
from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from game_conformance.cli import main as cli_main

from fakes import FakeGame, FakeSessionFactory

runner = CliRunner()


def _write_descriptors(path: Path) -> Path:
    games = [
        {"key": "2026-02-19", "url": "/games/2026-02-19/index.html", "name": "Vortex Shift"},
        {"key": "2026-02-20", "url": "/games/2026-02-20/index.html", "name": "Chrono Pop"},
    ]
    path.write_text(json.dumps({"games": games}), encoding="utf-8")
    return path


@pytest.fixture
def factory(monkeypatch: pytest.MonkeyPatch) -> FakeSessionFactory:
    fake = FakeSessionFactory(default=FakeGame(play_storage={"bestScore": "5"}))
    probed: list[str] = []

    async def fake_wait_for_server(base_url, **kwargs):
        probed.append(base_url)
        return 200

    monkeypatch.setattr(cli_main, "console", Console(width=200))
    monkeypatch.setattr(cli_main, "wait_for_server", fake_wait_for_server)
    monkeypatch.setattr(cli_main, "create_session_factory", lambda browser, headed: fake)
    monkeypatch.delenv("GAME_CONFORMANCE_BASE_URL", raising=False)
    monkeypatch.delenv("GAME_CONFORMANCE_BROWSER", raising=False)
    fake.probed = probed
    return fake


def test_list_prints_descriptors(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_main, "console", Console(width=200))
    path = _write_descriptors(tmp_path / "games.json")

    result = runner.invoke(cli_main.app, ["list", "--descriptors", str(path)])

    assert result.exit_code == 0
    assert "Vortex Shift" in result.output
    assert "2026-02-20" in result.output


def test_run_exits_zero_when_every_game_conforms(tmp_path: Path, factory: FakeSessionFactory) -> None:
    path = _write_descriptors(tmp_path / "games.json")
    results = tmp_path / "results"

    result = runner.invoke(
        cli_main.app,
        ["run", "--descriptors", str(path), "--results-dir", str(results), "--base-url", "http://127.0.0.1:9000"],
    )

    assert result.exit_code == cli_main.EXIT_CONFORMANT, result.output
    assert factory.probed == ["http://127.0.0.1:9000"]
    assert factory.factory_closed is True
    assert factory.sessions[0].calls[0] == ("navigate", "http://127.0.0.1:9000/games/2026-02-19/index.html")

    (run_dir,) = list(results.iterdir())
    manifest = json.loads((run_dir / "session.json").read_text(encoding="utf-8"))
    assert manifest["passed"] is True
    assert sorted(path.name for path in run_dir.glob("2026-*.json")) == ["2026-02-19.json", "2026-02-20.json"]


def test_run_exits_one_when_a_game_fails(tmp_path: Path, factory: FakeSessionFactory) -> None:
    factory.games["/2026-02-20/index.html"] = FakeGame(
        play_storage={"bestScore": "5"},
        load_errors=[("exception", "ReferenceError: AudioContext is not defined")],
    )
    path = _write_descriptors(tmp_path / "games.json")

    result = runner.invoke(cli_main.app, ["run", "--descriptors", str(path), "--no-save", "--ui", "quiet"])

    assert result.exit_code == cli_main.EXIT_NON_CONFORMANT
    assert "non-conformant" in result.output
    assert "expected 0 errors, found 1" in result.output


def test_run_selects_games_by_key(tmp_path: Path, factory: FakeSessionFactory) -> None:
    path = _write_descriptors(tmp_path / "games.json")

    result = runner.invoke(cli_main.app, ["run", "2026-02-20", "--descriptors", str(path), "--no-save"])

    assert result.exit_code == 0
    assert {session.url.split("/")[-2] for session in factory.sessions} == {"2026-02-20"}


@pytest.mark.parametrize(
    "args",
    [
        ["run", "2026-12-31", "--no-save"],
        ["run", "--ui", "fancy", "--no-save"],
        ["run", "--browser", "netscape", "--no-save"],
        ["run", "--max-concurrent-games", "0", "--no-save"],
    ],
)
def test_run_usage_errors_exit_two(tmp_path: Path, factory: FakeSessionFactory, args: list[str]) -> None:
    path = _write_descriptors(tmp_path / "games.json")

    result = runner.invoke(cli_main.app, args + ["--descriptors", str(path)])

    assert result.exit_code == cli_main.EXIT_USAGE
    assert "Error:" in result.output
    assert factory.sessions == []


def test_run_unreachable_server_exits_two(
    tmp_path: Path, factory: FakeSessionFactory, monkeypatch: pytest.MonkeyPatch
) -> None:
    from game_conformance.exceptions import ServerUnavailableError

    async def unreachable(base_url, **kwargs):
        raise ServerUnavailableError(f"Game server at {base_url} is not reachable after 1 attempt(s)")

    monkeypatch.setattr(cli_main, "wait_for_server", unreachable)
    path = _write_descriptors(tmp_path / "games.json")

    result = runner.invoke(cli_main.app, ["run", "--descriptors", str(path), "--no-save"])

    assert result.exit_code == cli_main.EXIT_USAGE
    assert "not reachable" in result.output


def test_run_saves_screenshots_of_failed_scenarios(tmp_path: Path, factory: FakeSessionFactory) -> None:
    factory.games["/2026-02-20/index.html"] = FakeGame(
        play_storage={"bestScore": "5"},
        load_errors=[("exception", "ReferenceError: AudioContext is not defined")],
    )
    path = _write_descriptors(tmp_path / "games.json")
    results = tmp_path / "results"

    result = runner.invoke(cli_main.app, ["run", "--descriptors", str(path), "--results-dir", str(results)])

    assert result.exit_code == cli_main.EXIT_NON_CONFORMANT
    (run_dir,) = list(results.iterdir())
    shots = sorted(shot.name for shot in (run_dir / "screenshots").iterdir())
    assert "2026-02-20-load.png" in shots
    assert not any(shot.startswith("2026-02-19") for shot in shots)
    manifest = json.loads((run_dir / "session.json").read_text(encoding="utf-8"))
    assert "screenshots/2026-02-20-load.png" in manifest["games"][1]["screenshots"]
    assert "Screenshot:" in result.output


def test_run_without_saving_takes_no_screenshots(tmp_path: Path, factory: FakeSessionFactory) -> None:
    factory.games["/2026-02-20/index.html"] = FakeGame(load_errors=[("console", "404 sound.mp3")])
    path = _write_descriptors(tmp_path / "games.json")

    result = runner.invoke(cli_main.app, ["run", "--descriptors", str(path), "--no-save"])

    assert result.exit_code == cli_main.EXIT_NON_CONFORMANT
    assert all(session.calls_named("screenshot") == [] for session in factory.sessions)


@pytest.mark.parametrize("payload", [{}, {"games": []}])
def test_run_with_empty_descriptor_file_exits_two(
    tmp_path: Path, factory: FakeSessionFactory, payload: dict
) -> None:
    path = tmp_path / "games.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    result = runner.invoke(cli_main.app, ["run", "--descriptors", str(path), "--no-save"])

    assert result.exit_code == cli_main.EXIT_USAGE
    assert "no game descriptors" in result.output
    assert factory.sessions == []
