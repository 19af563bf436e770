import asyncio

import pytest

from game_conformance.descriptors import GameDescriptor, PersistenceRule
from game_conformance.harness import ConformanceSuite
from game_conformance.runtime import NoOpObserver, StatusLevel
from game_conformance.scenarios import SCENARIO_NAMES, FailureKind, LoadIntegrity, VerdictStatus

from fakes import FakeGame, FakeSessionFactory, fast_config


class RecordingObserver(NoOpObserver):
    def __init__(self, explode_on: str | None = None):
        self.events: list[tuple[str, ...]] = []
        self.explode_on = explode_on

    async def on_scenario_start(self, descriptor, scenario):
        self.events.append(("start", descriptor.key, scenario))

    async def on_verdict(self, descriptor, verdict):
        self.events.append(("verdict", descriptor.key, verdict.scenario))
        if descriptor.key == self.explode_on and verdict.scenario == "render":
            raise RuntimeError("observer exploded")

    async def on_game_complete(self, report):
        self.events.append(("complete", report.key))

    async def on_status(self, message, level="info"):
        self.events.append(("status", StatusLevel(level).value, message))


def _game(key: str) -> GameDescriptor:
    return GameDescriptor(
        key=key,
        entry_url=f"/games/{key}/index.html",
        persistence=PersistenceRule(keywords=("score",)),
    )


def _healthy() -> FakeGame:
    return FakeGame(play_storage={"score": "10"})


def _run_suite(descriptors, factory, observer=None, **config):
    suite = ConformanceSuite(descriptors, fast_config(**config), factory)
    if observer is not None:
        suite.add_observer(observer)
    return asyncio.run(suite.run())


def test_load_failure_does_not_abort_later_scenarios_or_siblings() -> None:
    factory = FakeSessionFactory(
        games={
            "/a/index.html": FakeGame(
                play_storage={"score": "1"},
                load_errors=[("exception", "ReferenceError: audio is not defined")],
            ),
            "/b/index.html": _healthy(),
        }
    )

    report = _run_suite([_game("a"), _game("b")], factory)

    game_a = report.report_for("a")
    assert [verdict.scenario for verdict in game_a.verdicts] == list(SCENARIO_NAMES)
    assert game_a.verdict_for("load").failure_kind == FailureKind.LOAD
    # Render and persistence tolerate errors; the rest require a clean log.
    assert game_a.verdict_for("render").passed
    assert game_a.verdict_for("persistence").passed
    assert not game_a.conformant

    assert report.report_for("b").conformant
    assert not report.passed
    assert [game.key for game in report.failed_games()] == ["a"]


def test_reports_keep_descriptor_order_and_fixed_scenario_order() -> None:
    observer = RecordingObserver()
    factory = FakeSessionFactory(default=_healthy())

    report = _run_suite([_game("c"), _game("a"), _game("b")], factory, observer, max_concurrent_games=2)

    assert [game.key for game in report] == ["c", "a", "b"]
    assert report.passed
    for key in ("a", "b", "c"):
        started = [event[2] for event in observer.events if event[:2] == ("start", key)]
        assert started == list(SCENARIO_NAMES)
    assert sum(1 for event in observer.events if event[0] == "complete") == 3
    assert factory.open_count == factory.closed_count == 3 * len(SCENARIO_NAMES)


def test_each_scenario_gets_its_own_session() -> None:
    factory = FakeSessionFactory(default=_healthy())

    _run_suite([_game("a")], factory)

    assert len(factory.sessions) == len(SCENARIO_NAMES)
    assert all(session.calls[0][0] == "navigate" for session in factory.sessions)


def test_crashed_pipeline_is_isolated_to_its_game() -> None:
    observer = RecordingObserver(explode_on="b")
    factory = FakeSessionFactory(default=_healthy())

    report = _run_suite([_game("a"), _game("b")], factory, observer)

    crashed = report.report_for("b")
    assert [verdict.failure_kind for verdict in crashed.verdicts] == [FailureKind.HARNESS] * len(SCENARIO_NAMES)
    assert crashed.verdicts[0].unmet_condition == "game pipeline crashed: RuntimeError: observer exploded"
    assert report.report_for("a").conformant
    assert ("complete", "b") in observer.events
    assert any(event[0] == "status" and event[1] == "error" for event in observer.events)


def test_duplicate_scenario_names_are_rejected() -> None:
    with pytest.raises(ValueError, match="unique"):
        ConformanceSuite([], fast_config(), FakeSessionFactory(), scenarios=[LoadIntegrity(), LoadIntegrity()])


def test_suite_summary_counts_statuses_and_kinds() -> None:
    factory = FakeSessionFactory(
        games={
            "/slow/index.html": FakeGame(navigation_timeout=True),
            "/quiet/index.html": FakeGame(),
        },
        default=_healthy(),
    )
    descriptors = [
        _game("ok"),
        _game("slow"),
        GameDescriptor(
            key="quiet",
            entry_url="/games/quiet/index.html",
            persistence=PersistenceRule(keywords=("score",), game_over_only=True),
        ),
    ]

    report = _run_suite(descriptors, factory)
    summary = report.summary()

    assert summary["games"] == 3
    assert summary["conformant_games"] == 2
    assert summary["scenarios"] == 3 * len(SCENARIO_NAMES)
    assert summary["warned"] == 1
    assert summary["timeouts"] == summary["failed"] == len(SCENARIO_NAMES)
    assert summary["failures_by_kind"] == {"timeout": len(SCENARIO_NAMES)}

    as_dict = report.to_dict()
    assert as_dict["passed"] is False
    assert as_dict["base_url"] == "http://localhost:8080"
    quiet = as_dict["games"][2]
    assert quiet["conformant"] is True
    assert quiet["verdicts"][-1]["status"] == VerdictStatus.WARN.value


def test_quiet_observer_tallies_every_scenario_once_even_after_a_crash() -> None:
    from game_conformance.cli.ui import QuietObserver

    quiet = QuietObserver()
    factory = FakeSessionFactory(default=_healthy())
    suite = ConformanceSuite([_game("a"), _game("b")], fast_config(), factory)
    suite.add_observer(quiet)
    suite.add_observer(RecordingObserver(explode_on="b"))

    asyncio.run(suite.run())

    assert sum(quiet.counts.values()) == 2 * len(SCENARIO_NAMES)
    assert quiet.counts["fail"] == len(SCENARIO_NAMES) - 2
    assert quiet.describe() == f"pass {len(SCENARIO_NAMES) + 2} | warn 0 | fail {len(SCENARIO_NAMES) - 2}"
