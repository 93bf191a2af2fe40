#!/usr/bin/env python3
"""Tests for the command-based clipboard backends."""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from clipshare.clipboard_backend import (
    BACKENDS,
    DARWIN_BACKEND,
    WAYLAND_BACKEND,
    X11_BACKEND,
    BackendVariant,
)
from clipshare.errors import BackendError


def _process(stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0) -> MagicMock:
    proc = MagicMock()
    proc.communicate = AsyncMock(return_value=(stdout, stderr))
    proc.returncode = returncode
    return proc


@pytest.fixture
def mock_exec():
    """Patch subprocess creation in the backend module."""
    with patch(
        "clipshare.clipboard_backend.asyncio.create_subprocess_exec", new_callable=AsyncMock
    ) as mock:
        yield mock


class TestCommands:
    """Tests for the helper commands of each variant."""

    def test_every_variant_has_a_backend(self) -> None:
        """Test the backend table covers the whole variant set."""
        assert set(BACKENDS) == set(BackendVariant)

    @pytest.mark.parametrize(
        ("backend", "read_command", "write_command"),
        [
            (WAYLAND_BACKEND, ("wl-paste", "--no-newline"), ("wl-copy",)),
            (X11_BACKEND, ("xclip", "-rmlastnl", "-o"), ("xclip", "-i")),
            (DARWIN_BACKEND, ("pbpaste",), ("pbcopy",)),
        ],
    )
    def test_commands(self, backend, read_command, write_command) -> None:
        """Test each variant runs the expected helpers."""
        assert backend.read_command == read_command
        assert backend.write_command == write_command
        assert backend.name == backend.variant.value


@pytest.mark.asyncio
async def test_read_returns_text_and_diagnostic(mock_exec: AsyncMock) -> None:
    """Test read decodes stdout as UTF-8 and returns stderr alongside."""
    mock_exec.return_value = _process(stdout="grüße ✓".encode("utf-8"), stderr=b"note")

    text, diagnostic = await WAYLAND_BACKEND.read()

    assert text == "grüße ✓"
    assert diagnostic == "note"
    assert mock_exec.call_args.args == ("wl-paste", "--no-newline")


@pytest.mark.asyncio
async def test_read_nonzero_exit_is_not_an_error(mock_exec: AsyncMock) -> None:
    """Test an empty clipboard reported via exit status reads as empty text."""
    mock_exec.return_value = _process(stderr=b"Nothing is copied", returncode=1)

    text, diagnostic = await WAYLAND_BACKEND.read()

    assert text == ""
    assert "Nothing is copied" in diagnostic


@pytest.mark.asyncio
async def test_read_missing_helper_raises(mock_exec: AsyncMock) -> None:
    """Test a helper that cannot be started raises BackendError."""
    mock_exec.side_effect = FileNotFoundError("xclip")

    with pytest.raises(BackendError, match="xclip"):
        await X11_BACKEND.read()


@pytest.mark.asyncio
async def test_read_non_text_raises(mock_exec: AsyncMock) -> None:
    """Test clipboard bytes that are not UTF-8 raise BackendError."""
    mock_exec.return_value = _process(stdout=b"\xff\xfe\x00")

    with pytest.raises(BackendError, match="UTF-8"):
        await DARWIN_BACKEND.read()


@pytest.mark.asyncio
async def test_write_feeds_text_on_stdin(mock_exec: AsyncMock) -> None:
    """Test write sends the UTF-8 encoded text to the helper."""
    proc = _process()
    mock_exec.return_value = proc

    await DARWIN_BACKEND.write("copié")

    assert mock_exec.call_args.args == ("pbcopy",)
    proc.communicate.assert_awaited_once_with("copié".encode("utf-8"))


@pytest.mark.asyncio
async def test_write_nonzero_exit_raises(mock_exec: AsyncMock) -> None:
    """Test a failing write helper raises BackendError."""
    mock_exec.return_value = _process(returncode=1)

    with pytest.raises(BackendError, match="status 1"):
        await X11_BACKEND.write("x")


@pytest.mark.asyncio
async def test_write_missing_helper_raises(mock_exec: AsyncMock) -> None:
    """Test a write helper that cannot be started raises BackendError."""
    mock_exec.side_effect = PermissionError("wl-copy")

    with pytest.raises(BackendError, match="wl-copy"):
        await WAYLAND_BACKEND.write("x")
