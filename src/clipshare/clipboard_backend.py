"""System clipboard access through OS helper commands.

Clipboard reads and writes are delegated to an out-of-process helper
(wl-paste/wl-copy on Wayland, xclip on X11, pbpaste/pbcopy on macOS).
The helper runs as an asyncio subprocess so waiting for it never blocks
the event loop; only the caller that started it awaits its completion.

The module handles:
- The ClipboardBackend interface consumed by ClipboardStore
- The fixed set of command-based backend variants
- Translating helper failures into BackendError
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from clipshare.errors import BackendError

logger = logging.getLogger(__name__)


class ClipboardBackend(Protocol):
    """Read and write text on the system clipboard."""

    name: str

    async def read(self) -> tuple[str, str]:
        """Return (clipboard text, diagnostic text)."""
        ...

    async def write(self, text: str) -> None:
        """Replace the clipboard contents with text."""
        ...


class BackendVariant(str, Enum):
    """Supported clipboard mechanisms."""

    WAYLAND = "wayland"
    X11 = "x11"
    DARWIN = "darwin"


@dataclass(frozen=True)
class CommandBackend:
    """Clipboard backend driven by a pair of helper commands.

    Attributes:
        variant: Which clipboard mechanism the commands talk to.
        read_command: argv printing the clipboard text on stdout.
        write_command: argv reading the new clipboard text from stdin.
    """

    variant: BackendVariant
    read_command: tuple[str, ...]
    write_command: tuple[str, ...]

    @property
    def name(self) -> str:
        return self.variant.value

    async def read(self) -> tuple[str, str]:
        """Run the read helper and return its output.

        A non-zero exit status is not an error: helpers report an empty
        clipboard that way, with the reason on stderr.

        Returns:
            Tuple of (clipboard text, helper stderr).

        Raises:
            BackendError: If the helper cannot be started or prints
                something that is not UTF-8 text.
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                *self.read_command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await proc.communicate()
        except OSError as e:
            raise BackendError(f"Failed to run {self.read_command[0]}: {e}") from e

        diagnostic = stderr.decode("utf-8", errors="replace")
        if proc.returncode != 0:
            logger.debug(
                "%s exited with status %s: %s",
                self.read_command[0], proc.returncode, diagnostic.strip(),
            )
        try:
            return stdout.decode("utf-8"), diagnostic
        except UnicodeDecodeError as e:
            raise BackendError(f"Clipboard content is not UTF-8 text: {e}") from e

    async def write(self, text: str) -> None:
        """Feed text to the write helper and wait for it to exit.

        Helpers such as xclip and wl-copy fork a child that keeps serving
        the selection, so no output pipe is attached: the child would hold
        it open long after the helper itself exited.

        Args:
            text: New clipboard contents.

        Raises:
            BackendError: If the helper cannot be started or exits non-zero.
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                *self.write_command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            await proc.communicate(text.encode("utf-8"))
        except OSError as e:
            raise BackendError(f"Failed to run {self.write_command[0]}: {e}") from e

        if proc.returncode != 0:
            raise BackendError(
                f"{self.write_command[0]} exited with status {proc.returncode}"
            )


WAYLAND_BACKEND = CommandBackend(
    variant=BackendVariant.WAYLAND,
    read_command=("wl-paste", "--no-newline"),
    write_command=("wl-copy",),
)

X11_BACKEND = CommandBackend(
    variant=BackendVariant.X11,
    read_command=("xclip", "-rmlastnl", "-o"),
    write_command=("xclip", "-i"),
)

DARWIN_BACKEND = CommandBackend(
    variant=BackendVariant.DARWIN,
    read_command=("pbpaste",),
    write_command=("pbcopy",),
)

BACKENDS: dict[BackendVariant, CommandBackend] = {
    BackendVariant.WAYLAND: WAYLAND_BACKEND,
    BackendVariant.X11: X11_BACKEND,
    BackendVariant.DARWIN: DARWIN_BACKEND,
}
