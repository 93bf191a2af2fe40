#!/usr/bin/env python3
"""Pytest fixtures for clipshare tests.

Provides an in-memory clipboard backend, stores and sync state built on
it, and a temporary configuration directory with certificate files.
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from clipshare.store import ClipboardStore
from clipshare.sync_state import SyncState


class FakeBackend:
    """In-memory clipboard backend recording every call.

    Writes become visible to later reads, like a real clipboard.
    """

    name = "fake"

    def __init__(self, value: str = "") -> None:
        self.value = value
        self.reads = 0
        self.writes: list[str] = []
        self.read_error: Exception | None = None
        self.write_error: Exception | None = None

    async def read(self) -> tuple[str, str]:
        self.reads += 1
        if self.read_error is not None:
            raise self.read_error
        return self.value, ""

    async def write(self, text: str) -> None:
        self.writes.append(text)
        if self.write_error is not None:
            raise self.write_error
        self.value = text


@pytest.fixture
def backend() -> FakeBackend:
    """Create an empty FakeBackend."""
    return FakeBackend()


@pytest.fixture
def store(backend: FakeBackend) -> ClipboardStore:
    """Create a ClipboardStore on the fake backend without settle delay."""
    return ClipboardStore(backend, history_size=10, settle_delay=0)


@pytest.fixture
def mock_peer() -> MagicMock:
    """Create a mock PeerClient."""
    peer = MagicMock()
    peer.send = AsyncMock()
    peer.aclose = AsyncMock()
    return peer


@pytest.fixture
def sync_state(store: ClipboardStore, mock_peer: MagicMock) -> SyncState:
    """Create a SyncState with a real store and a mock peer."""
    return SyncState(store=store, peer=mock_peer)


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Provide a config directory with default-named certificate files."""
    certs = tmp_path / "certs"
    certs.mkdir()
    for filename in ("local.key", "local.cert", "remote.pem"):
        (certs / filename).write_text("placeholder\n")
    return tmp_path
