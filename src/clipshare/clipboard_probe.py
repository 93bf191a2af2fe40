"""Clipboard mechanism detection.

Runs once at startup and picks the backend variant that matches the
current session. The selected backend is injected into the ClipboardStore;
nothing downstream branches on the operating system again.

Detection order on Linux follows the session type first and the display
environment variables second, so a Wayland session with XWayland still
uses the native Wayland helpers.
"""

from __future__ import annotations

import logging
import os
import platform
from collections.abc import Mapping

from clipshare.clipboard_backend import BACKENDS, BackendVariant, CommandBackend
from clipshare.errors import UnsupportedBackendError

logger = logging.getLogger(__name__)


def detect_variant(
    environ: Mapping[str, str] | None = None,
    system: str | None = None,
) -> BackendVariant:
    """Decide which clipboard mechanism the session provides.

    Args:
        environ: Environment to inspect, defaults to os.environ.
        system: Operating system name as reported by platform.system().

    Returns:
        The matching BackendVariant.

    Raises:
        UnsupportedBackendError: If no supported mechanism is detected.
    """
    env = os.environ if environ is None else environ
    system = platform.system() if system is None else system

    if system == "Linux":
        session_type = env.get("XDG_SESSION_TYPE", "")
        if session_type == "wayland" or env.get("WAYLAND_DISPLAY", ""):
            return BackendVariant.WAYLAND
        if session_type == "x11" or env.get("DISPLAY", ""):
            return BackendVariant.X11
        raise UnsupportedBackendError("Unknown/unsupported session type")
    if system == "Darwin":
        return BackendVariant.DARWIN
    raise UnsupportedBackendError(f"Unsupported OS: {system}")


def validate_display(display_name: str | None) -> None:
    """Check that the X server named by DISPLAY accepts connections.

    xclip would otherwise fail on every single poll; failing here stops
    the process before the sync loop starts.

    Args:
        display_name: Value of DISPLAY, or None to let Xlib use its default.

    Raises:
        UnsupportedBackendError: If the X11 connection fails.
    """
    try:
        from Xlib.display import Display as XDisplay

        display = XDisplay(display_name)
    except Exception as e:
        raise UnsupportedBackendError(f"Failed to connect to X11 display: {e}") from e
    display.close()


def detect_backend(
    environ: Mapping[str, str] | None = None,
    system: str | None = None,
) -> CommandBackend:
    """Select the clipboard backend for this process.

    Args:
        environ: Environment to inspect, defaults to os.environ.
        system: Operating system name, defaults to platform.system().

    Returns:
        The CommandBackend for the detected mechanism.

    Raises:
        UnsupportedBackendError: If detection or X11 validation fails.
    """
    env = os.environ if environ is None else environ
    variant = detect_variant(env, system)
    if variant is BackendVariant.X11:
        validate_display(env.get("DISPLAY") or None)
    logger.info("Clipboard backend: %s", variant.value)
    return BACKENDS[variant]
