"""Pytest fixtures for tests."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from fakes import FakeOpener, RecordingObserver
from ledbridge.device import SerialConnectionManager


@pytest.fixture
def temp_dir():
    """Create a temporary directory that gets cleaned up."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def opener():
    """Opener producing in-memory transports."""
    return FakeOpener()


@pytest.fixture
def manager(opener):
    """Closed connection manager wired to the fake opener."""
    mgr = SerialConnectionManager(
        "/dev/fake", read_timeout=0.05, reconnect_delay=1.0, opener=opener
    )
    yield mgr
    mgr.disconnect()


@pytest.fixture
def observer(manager):
    """Observer registered on the manager fixture."""
    obs = RecordingObserver()
    manager.register_observer(obs)
    return obs
