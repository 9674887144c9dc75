"""Shared fixtures for replay tests"""

import logging
import shutil
from pathlib import Path

import pytest

from fixture_replay.replay import CapabilityRegistry, FixtureStore, ReplayConfig
from fixture_replay.storage import BlobCodec, FixtureDirectory
from fixture_replay.utils.logging import PACKAGE_LOGGER

FIXTURES_DIR = Path(__file__).parent / "fixtures"
REPLAY_FIXTURES_DIR = FIXTURES_DIR / "replay"


@pytest.fixture
def registry():
    """Matchers and resolvers referenced by the sample fixtures"""
    registry = CapabilityRegistry()

    @registry.matcher("echo")
    def is_echo(context):
        parm = context.call.parm
        return isinstance(parm, dict) and parm.get("echo")

    @registry.resolver("echo")
    def echo(context):
        return context.call.parm

    return registry


@pytest.fixture
def memory_store():
    """Store that keeps recordings in memory only"""
    return FixtureStore(config=ReplayConfig(write_live=False))


@pytest.fixture
def replay_dir(tmp_path):
    """Writable copy of the sample fixture directory"""
    target = tmp_path / "replay"
    shutil.copytree(REPLAY_FIXTURES_DIR, target)
    return target


@pytest.fixture
def make_store(registry):
    """Factory for stores backed by a fixture directory"""

    def factory(directory, **overrides):
        config = ReplayConfig(directory=str(directory), **overrides)
        files = FixtureDirectory(config=config, codec=BlobCodec(registry))
        return FixtureStore(config=config, files=files)

    return factory


@pytest.fixture
def package_logger():
    """Package logger, restored after a test reconfigures it"""
    logger = logging.getLogger(PACKAGE_LOGGER)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    handlers, level, propagate = saved
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate
