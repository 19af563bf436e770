"""Game descriptor model and loaders."""

from .descriptor import (
    Action,
    ActionKind,
    GameDescriptor,
    PersistenceRule,
    Point,
    RenderedSignal,
    SignalKind,
)
from .loader import (
    load_descriptor_directory,
    load_descriptor_file,
    load_descriptors,
    parse_descriptor,
    select_descriptors,
)

__all__ = [
    "Action",
    "ActionKind",
    "GameDescriptor",
    "PersistenceRule",
    "Point",
    "RenderedSignal",
    "SignalKind",
    "load_descriptor_directory",
    "load_descriptor_file",
    "load_descriptors",
    "parse_descriptor",
    "select_descriptors",
]
