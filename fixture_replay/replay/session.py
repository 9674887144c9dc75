"""Replay Session

Routes calls to an external dependency through the fixture store
according to the test mode.
"""

from enum import Enum
from functools import wraps
from typing import Any, Callable, Optional

from ..storage.codec import BlobCodec
from ..storage.fixture_files import FixtureDirectory
from ..utils.logging import get_logger, setup_logging
from .config import ReplayConfig
from .descriptors import NO_RESULT, CapabilityRegistry
from .store import FixtureStore

logger = get_logger(__name__)


class ReplayMode(Enum):
    """Replay mode"""
    LIVE = "live"           # call the real dependency, keep nothing
    RECORD = "record"       # call the real dependency and record the result
    REPLAY = "replay"       # answer from fixtures only


class ReplaySession:
    """Mode-driven front end of a FixtureStore"""

    def __init__(
        self,
        store: FixtureStore,
        mode: ReplayMode = ReplayMode.REPLAY,
        live_on_miss: bool = False,
    ):
        """Initialize the session.

        Args:
            store: Fixture store
            mode: Replay mode
            live_on_miss: In replay mode, call the real dependency when no
                fixture matches instead of returning NO_RESULT
        """
        self.store = store
        self.mode = mode
        self.live_on_miss = live_on_miss

        self.stats = {
            "hits": 0,
            "misses": 0,
            "recorded": 0,
            "live_calls": 0,
        }

    def get_or_call(self, key: str, parm: Any, call_fn: Callable[[], Any]) -> Any:
        """Get a value from fixtures or from the real dependency.

        Args:
            key: Correspondence key (e.g. "fmp:quote")
            parm: Call parameter
            call_fn: Calls the real dependency and returns its value

        Returns:
            Recorded or live value; NO_RESULT on a replay miss
        """
        if self.mode == ReplayMode.REPLAY:
            value = self.store.playback(key, parm)
            if value is not NO_RESULT:
                self.stats["hits"] += 1
                return value

            self.stats["misses"] += 1
            logger.warning(f"Replay miss: {key!r} {parm!r}")
            if not self.live_on_miss:
                return NO_RESULT

        value = call_fn()
        self.stats["live_calls"] += 1

        if self.mode == ReplayMode.RECORD:
            self.store.record(key, parm, value)
            self.stats["recorded"] += 1

        return value

    def get_stats(self) -> dict:
        """Get session statistics"""
        return {
            **self.stats,
            "mode": self.mode.value,
            "store": self.store.get_stats(),
        }


def replayable(
    session: ReplaySession,
    key: Optional[str] = None,
    parm_func: Optional[Callable[..., Any]] = None,
) -> Callable:
    """Decorator routing a function's calls through a session.

    Args:
        session: Replay session
        key: Correspondence key (default: the function's qualified name)
        parm_func: Builds the parm from the call arguments (default:
            ``{"args": [...], "kwargs": {...}}``)

    Returns:
        Decorator function
    """

    def decorator(func: Callable) -> Callable:
        call_key = key or f"{func.__module__}.{func.__qualname__}"

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if parm_func:
                parm = parm_func(*args, **kwargs)
            else:
                parm = {"args": list(args), "kwargs": kwargs}

            return session.get_or_call(call_key, parm, lambda: func(*args, **kwargs))

        return wrapper

    return decorator


def init_session(
    mode: str = "replay",
    config: Optional[ReplayConfig] = None,
    registry: Optional[CapabilityRegistry] = None,
    live_on_miss: bool = False,
) -> ReplaySession:
    """Build a session with its store and fixture directory.

    Fixtures are loaded in replay and record modes so that recording
    continues after the highest existing ordinals.

    Args:
        mode: Mode (live/record/replay)
        config: Replay settings (default: from REPLAY_* environment)
        registry: Named matchers/resolvers referenced by fixtures
        live_on_miss: See ReplaySession

    Returns:
        ReplaySession instance
    """
    replay_mode = ReplayMode(mode)
    config = config or ReplayConfig.from_env()
    if config.log_level:
        setup_logging(config.log_level, config.log_format, config.log_file)

    directory = FixtureDirectory(config=config, codec=BlobCodec(registry))
    store = FixtureStore(config=config, files=directory)

    if replay_mode != ReplayMode.LIVE:
        report = store.load_directory()
        logger.info(
            f"Replay session ({replay_mode.value}): {report.loaded} blobs, "
            f"{len(store.index)} keys from {directory.base_dir}"
        )

    return ReplaySession(store, mode=replay_mode, live_on_miss=live_on_miss)
