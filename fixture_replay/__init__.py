"""Record/replay fixture store for offline integration tests"""

from .replay import (
    NO_RESULT,
    CapabilityRegistry,
    FixtureStore,
    ReplayConfig,
    ReplayMode,
    ReplaySession,
)

__all__ = [
    "NO_RESULT",
    "CapabilityRegistry",
    "FixtureStore",
    "ReplayConfig",
    "ReplayMode",
    "ReplaySession",
]

__version__ = "0.1.0"
