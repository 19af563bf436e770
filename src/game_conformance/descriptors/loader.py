"""Load JSON descriptor files into GameDescriptor objects."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Optional

from ..exceptions import DescriptorError
from .descriptor import (
    Action,
    ActionKind,
    GameDescriptor,
    PersistenceRule,
    Point,
    RenderedSignal,
    SignalKind,
    DEFAULT_SCORE_KEYWORDS,
)


def _parse_point(raw: Any, field_name: str) -> Optional[Point]:
    if raw is None:
        return None
    if isinstance(raw, dict):
        try:
            return Point(x=float(raw["x"]), y=float(raw["y"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise DescriptorError(f"'{field_name}' must have numeric x and y: {raw!r}") from exc
    if isinstance(raw, (list, tuple)) and len(raw) == 2:
        try:
            return Point(x=float(raw[0]), y=float(raw[1]))
        except (TypeError, ValueError) as exc:
            raise DescriptorError(f"'{field_name}' must be two numbers: {raw!r}") from exc
    raise DescriptorError(
        f"'{field_name}' must be {{'x': .., 'y': ..}} or [x, y]; got {type(raw).__name__}"
    )


def _parse_signal(raw: Any) -> RenderedSignal:
    if isinstance(raw, str):
        return RenderedSignal(kind=SignalKind.from_string(raw))
    if isinstance(raw, dict):
        kind = raw.get("kind") or raw.get("type")
        if not kind:
            raise DescriptorError(f"Rendered signal is missing 'kind': {raw!r}")
        return RenderedSignal(kind=SignalKind.from_string(kind), selector=raw.get("selector"))
    raise TypeError(
        "Rendered signal must be a string or dict; "
        f"got {type(raw).__name__}"
    )


def _parse_action(raw: Any) -> Action:
    if not isinstance(raw, dict):
        raise TypeError(
            "Each recipe action must be a dict; "
            f"got {type(raw).__name__}"
        )
    kind = raw.get("action") or raw.get("kind")
    if not kind:
        raise DescriptorError(f"Recipe action is missing 'action': {raw!r}")

    delay = raw.get("delay_ms")
    return Action(
        kind=ActionKind.from_string(kind),
        selector=raw.get("selector"),
        position=_parse_point(raw.get("position"), "position"),
        key=raw.get("key"),
        text=raw.get("text"),
        start=_parse_point(raw.get("from") or raw.get("start"), "from"),
        end=_parse_point(raw.get("to") or raw.get("end"), "to"),
        steps=int(raw.get("steps", 10)),
        delay_ms=int(delay) if delay is not None else None,
    )


def _parse_persistence(raw: Any) -> PersistenceRule:
    if raw is None:
        return PersistenceRule()
    if not isinstance(raw, dict):
        raise TypeError(
            "'persistence' must be a dict; "
            f"got {type(raw).__name__}"
        )
    keywords = raw.get("keywords") or DEFAULT_SCORE_KEYWORDS
    if isinstance(keywords, str):
        keywords = (keywords,)
    return PersistenceRule(
        keywords=tuple(keywords),
        game_over_only=bool(raw.get("game_over_only", False)),
    )


def _as_str_tuple(raw: Any, field_name: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        return (raw,)
    if isinstance(raw, (list, tuple)):
        return tuple(str(item) for item in raw)
    raise TypeError(f"'{field_name}' must be a string or list; got {type(raw).__name__}")


def parse_descriptor(entry: dict[str, Any]) -> GameDescriptor:
    """Build a GameDescriptor from one JSON entry.

    Missing optional fields fall back to the GameDescriptor defaults.
    """
    if not isinstance(entry, dict):
        raise TypeError(f"Descriptor entry must be a dict; got {type(entry).__name__}")

    kwargs: dict[str, Any] = {
        "key": str(entry.get("key") or entry.get("date") or ""),
        "entry_url": str(entry.get("url") or entry.get("entry_url") or ""),
        "name": str(entry.get("name") or ""),
        "title_fragments": _as_str_tuple(entry.get("title_fragments"), "title_fragments"),
        "persistence": _parse_persistence(entry.get("persistence")),
    }

    raw_signals = entry.get("rendered_signals")
    if raw_signals is not None:
        if isinstance(raw_signals, (str, dict)):
            raw_signals = [raw_signals]
        kwargs["rendered_signals"] = tuple(_parse_signal(raw) for raw in raw_signals)

    raw_recipe = entry.get("recipe")
    if raw_recipe is not None:
        if isinstance(raw_recipe, dict):
            raw_recipe = [raw_recipe]
        kwargs["recipe"] = tuple(_parse_action(raw) for raw in raw_recipe)

    stress_keys = _as_str_tuple(entry.get("stress_keys"), "stress_keys")
    if stress_keys:
        kwargs["stress_keys"] = stress_keys

    return GameDescriptor(**kwargs)


def load_descriptor_file(path: Path) -> list[GameDescriptor]:
    """Load descriptors from a JSON file with a top-level ``games`` array.

    Args:
        path: Path to JSON descriptor file

    Returns:
        List of GameDescriptor objects, in file order

    Raises:
        DescriptorError: If the file declares no games or an entry is invalid
    """
    with path.open("r", encoding="utf-8") as f:
        payload = json.load(f)

    if isinstance(payload, list):
        entries = payload
    elif isinstance(payload, dict):
        entries = payload.get("games", [])
    else:
        raise DescriptorError(f"{path.name}: expected an object or array at top level")
    if not isinstance(entries, list):
        raise DescriptorError(f"{path.name}: 'games' must be an array")
    if not entries:
        raise DescriptorError(f"{path.name}: no game descriptors")

    descriptors: list[GameDescriptor] = []
    for index, entry in enumerate(entries):
        try:
            descriptors.append(parse_descriptor(entry))
        except (DescriptorError, TypeError, ValueError) as exc:
            raise DescriptorError(f"{path.name}: game #{index + 1}: {exc}") from exc

    _ensure_unique(descriptors, origin=path.name)
    return descriptors


def load_descriptor_directory(directory: Path) -> dict[str, list[GameDescriptor]]:
    """Load all JSON descriptor files from a directory.

    Args:
        directory: Path to directory containing JSON files

    Returns:
        Dict mapping file stem to list of descriptors

    Raises:
        DescriptorError: If the directory is missing, has no JSON files, or
            two files declare the same key
    """
    if not directory.is_dir():
        raise DescriptorError(f"Not a directory: {directory}")

    json_files = sorted(directory.glob("*.json"))
    if not json_files:
        raise DescriptorError(f"No JSON files found in directory: {directory}")

    result: dict[str, list[GameDescriptor]] = {}
    for json_file in json_files:
        result[json_file.stem] = load_descriptor_file(json_file)

    _ensure_unique(
        [descriptor for descriptors in result.values() for descriptor in descriptors],
        origin=str(directory),
    )
    return result


def load_descriptors(path: Path) -> list[GameDescriptor]:
    """Load descriptors from a file or directory, flattened in source order."""
    if not path.exists():
        raise DescriptorError(f"Descriptor path does not exist: {path}")
    if path.is_dir():
        return [
            descriptor
            for descriptors in load_descriptor_directory(path).values()
            for descriptor in descriptors
        ]
    return load_descriptor_file(path)


def select_descriptors(
    descriptors: Iterable[GameDescriptor],
    keys: Optional[Iterable[str]] = None,
) -> list[GameDescriptor]:
    """Filter descriptors down to the requested keys, keeping source order.

    Raises:
        DescriptorError: If a requested key is not present
    """
    descriptors = list(descriptors)
    wanted = [key for key in (keys or []) if key]
    if not wanted:
        return descriptors

    known = {descriptor.key for descriptor in descriptors}
    missing = [key for key in wanted if key not in known]
    if missing:
        raise DescriptorError(
            f"Unknown game key(s): {', '.join(missing)}. "
            f"Known keys: {', '.join(sorted(known))}"
        )
    selected = set(wanted)
    return [descriptor for descriptor in descriptors if descriptor.key in selected]


def _ensure_unique(descriptors: list[GameDescriptor], origin: str) -> None:
    seen: set[str] = set()
    for descriptor in descriptors:
        if descriptor.key in seen:
            raise DescriptorError(f"{origin}: duplicate game key '{descriptor.key}'")
        seen.add(descriptor.key)
