"""Replay Module

Record/replay fixture store: key entries, value slots, matching, value
resolution and fixture naming.
"""

from .config import ReplayConfig
from .descriptors import (
    NO_RESULT,
    Call,
    CallContext,
    CapabilityRegistry,
    Computed,
    ExternalReference,
    Inline,
    Predicate,
)
from .entry import KeyEntry, ValueSlot
from .errors import PersistenceError, ReplayError, ResolutionError, ValidationError
from .session import ReplayMode, ReplaySession, init_session, replayable
from .store import FixtureStore, LoadReport

__all__ = [
    "ReplayConfig",
    "NO_RESULT",
    "Call",
    "CallContext",
    "CapabilityRegistry",
    "Computed",
    "ExternalReference",
    "Inline",
    "Predicate",
    "KeyEntry",
    "ValueSlot",
    "ReplayError",
    "ValidationError",
    "ResolutionError",
    "PersistenceError",
    "ReplayMode",
    "ReplaySession",
    "init_session",
    "replayable",
    "FixtureStore",
    "LoadReport",
]
