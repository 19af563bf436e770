import json
from pathlib import Path

import pytest

from game_conformance.descriptors import (
    ActionKind,
    GameDescriptor,
    Point,
    RenderedSignal,
    SignalKind,
    load_descriptor_directory,
    load_descriptor_file,
    load_descriptors,
    parse_descriptor,
    select_descriptors,
)
from game_conformance.exceptions import DescriptorError

SHIPPED_DESCRIPTORS = Path(__file__).resolve().parents[1] / "descriptors"


def _write(path: Path, games: list[dict]) -> Path:
    path.write_text(json.dumps({"games": games}), encoding="utf-8")
    return path


def test_shipped_descriptors_cover_every_published_game() -> None:
    games = load_descriptors(SHIPPED_DESCRIPTORS)

    keys = [game.key for game in games]
    assert len(keys) == 13
    assert keys[0] == "2026-02-17"
    assert keys[-1] == "2026-03-01"
    assert "example" not in keys
    assert all(game.entry_url == f"/games/{game.key}/index.html" for game in games)


def test_shipped_descriptors_carry_game_specific_details() -> None:
    games = {game.key: game for game in load_descriptors(SHIPPED_DESCRIPTORS)}

    word_blitz = games["2026-02-17"]
    assert word_blitz.persistence.game_over_only is True
    assert [action.kind for action in word_blitz.recipe] == [
        ActionKind.CLICK,
        ActionKind.TYPE,
        ActionKind.TYPE,
    ]

    neon_slicer = games["2026-02-18"]
    assert neon_slicer.title_fragments == ("NEON SLICER", "SLICE IT!")
    assert neon_slicer.recipe[1].kind == ActionKind.DRAG
    assert neon_slicer.recipe[1].start == Point(50, 200)
    assert neon_slicer.recipe[1].steps == 20

    assert games["2026-02-23"].stress_keys == ("ArrowUp", "ArrowRight", "ArrowDown", "ArrowLeft")
    assert games["2026-02-23"].name == "2026-02-23"


def test_example_descriptor_lives_apart_from_the_published_games() -> None:
    games = load_descriptor_file(SHIPPED_DESCRIPTORS / "examples" / "example-game.json")

    assert [game.key for game in games] == ["example"]
    assert {signal.kind for signal in games[0].rendered_signals} == {
        SignalKind.CANVAS,
        SignalKind.CONTAINER,
        SignalKind.TEXT,
    }


def test_parse_descriptor_applies_defaults() -> None:
    descriptor = parse_descriptor({"key": "2026-03-02", "url": "/games/2026-03-02/index.html"})

    assert descriptor.name == "2026-03-02"
    assert descriptor.title_fragments == ()
    assert descriptor.rendered_signals == (
        RenderedSignal(SignalKind.CANVAS),
        RenderedSignal(SignalKind.CONTAINER),
    )
    assert len(descriptor.recipe) == 1
    assert descriptor.recipe[0].kind == ActionKind.CLICK
    assert descriptor.recipe[0].selector == "body"
    assert descriptor.stress_keys == ("Space",)
    assert descriptor.persistence.game_over_only is False


def test_parse_descriptor_accepts_aliases_and_point_forms() -> None:
    descriptor = parse_descriptor(
        {
            "date": "2026-03-02",
            "entry_url": "games/2026-03-02/index.html",
            "rendered_signals": {"type": "drawing_surface", "selector": "#board"},
            "recipe": [
                {"kind": "swipe", "start": {"x": 1, "y": 2}, "end": [3, 4]},
                {"action": "key_press", "key": "Enter"},
                {"action": "touch_tap", "position": [10, 20], "delay_ms": 0},
            ],
        }
    )

    assert descriptor.key == "2026-03-02"
    assert descriptor.rendered_signals == (RenderedSignal(SignalKind.CANVAS, "#board"),)
    drag, key, tap = descriptor.recipe
    assert drag.kind == ActionKind.DRAG
    assert (drag.start, drag.end) == (Point(1, 2), Point(3, 4))
    assert key.kind == ActionKind.KEY and key.key == "Enter"
    assert tap.kind == ActionKind.TAP and tap.position == Point(10, 20) and tap.delay_ms == 0


@pytest.mark.parametrize(
    "entry, message",
    [
        ({"url": "/a.html"}, "key cannot be empty"),
        ({"key": "a"}, "empty entry_url"),
        ({"key": "a", "url": "/a.html", "rendered_signals": []}, "at least one rendered signal"),
        ({"key": "a", "url": "/a.html", "rendered_signals": ["hologram"]}, "Unsupported rendered signal"),
        ({"key": "a", "url": "/a.html", "recipe": [{"action": "wiggle"}]}, "Unsupported action kind"),
        ({"key": "a", "url": "/a.html", "recipe": [{"action": "drag", "from": [0, 0]}]}, "start and end"),
        ({"key": "a", "url": "/a.html", "recipe": [{"action": "click"}]}, "selector, a position"),
        ({"key": "a", "url": "/a.html", "persistence": {"keywords": [" "]}}, "blank entries"),
    ],
)
def test_parse_descriptor_rejects_invalid_entries(entry: dict, message: str) -> None:
    with pytest.raises(DescriptorError, match=message):
        parse_descriptor(entry)


def test_text_signal_rejects_selector() -> None:
    with pytest.raises(DescriptorError):
        RenderedSignal(SignalKind.TEXT, selector="body")


def test_load_file_reports_the_offending_game(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "games.json",
        [{"key": "ok", "url": "/ok.html"}, {"key": "bad", "url": "/bad.html", "rendered_signals": []}],
    )

    with pytest.raises(DescriptorError, match=r"games\.json: game #2"):
        load_descriptor_file(path)


def test_load_file_rejects_duplicate_keys(tmp_path: Path) -> None:
    path = _write(tmp_path / "games.json", [{"key": "a", "url": "/a.html"}, {"key": "a", "url": "/b.html"}])

    with pytest.raises(DescriptorError, match="duplicate game key 'a'"):
        load_descriptor_file(path)


@pytest.mark.parametrize("payload", [{}, {"games": []}, []])
def test_load_file_rejects_a_file_without_games(tmp_path: Path, payload) -> None:
    path = tmp_path / "games.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(DescriptorError, match=r"games\.json: no game descriptors"):
        load_descriptor_file(path)


def test_load_file_rejects_non_array_games(tmp_path: Path) -> None:
    path = tmp_path / "games.json"
    path.write_text(json.dumps({"games": {"key": "a"}}), encoding="utf-8")

    with pytest.raises(DescriptorError, match="must be an array"):
        load_descriptor_file(path)


def test_load_directory_rejects_an_empty_file(tmp_path: Path) -> None:
    _write(tmp_path / "a.json", [{"key": "a", "url": "/a.html"}])
    _write(tmp_path / "b.json", [])

    with pytest.raises(DescriptorError, match=r"b\.json: no game descriptors"):
        load_descriptor_directory(tmp_path)


def test_load_directory_is_sorted_and_unique_across_files(tmp_path: Path) -> None:
    _write(tmp_path / "b.json", [{"key": "b", "url": "/b.html"}])
    _write(tmp_path / "a.json", [{"key": "a", "url": "/a.html"}])

    loaded = load_descriptor_directory(tmp_path)
    assert list(loaded) == ["a", "b"]
    assert [game.key for game in load_descriptors(tmp_path)] == ["a", "b"]

    _write(tmp_path / "c.json", [{"key": "a", "url": "/elsewhere.html"}])
    with pytest.raises(DescriptorError, match="duplicate game key 'a'"):
        load_descriptor_directory(tmp_path)


def test_load_descriptors_rejects_missing_path(tmp_path: Path) -> None:
    with pytest.raises(DescriptorError, match="does not exist"):
        load_descriptors(tmp_path / "missing")


def test_select_descriptors_keeps_source_order() -> None:
    games = [GameDescriptor(key=key, entry_url=f"/{key}.html") for key in ("a", "b", "c")]

    assert [game.key for game in select_descriptors(games, ["c", "a"])] == ["a", "c"]
    assert select_descriptors(games, None) == games

    with pytest.raises(DescriptorError, match="Unknown game key"):
        select_descriptors(games, ["z"])


def test_first_pointer_action_prefers_taps() -> None:
    descriptor = parse_descriptor(
        {
            "key": "a",
            "url": "/a.html",
            "recipe": [
                {"action": "key", "key": "Space"},
                {"action": "click", "selector": "button"},
                {"action": "tap", "selector": "#start"},
            ],
        }
    )

    assert descriptor.first_pointer_action().selector == "#start"
    assert GameDescriptor(key="b", entry_url="/b.html", recipe=()).first_pointer_action() is None
