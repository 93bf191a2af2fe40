"""CLI handling for clipshare.

This module provides the command-line interface for clipshare, handling
argument parsing via click, settings resolution, logging configuration,
clipboard backend detection, and starting the sync loop.

Usage:
    clipshare --remote HOST[:PORT] [--listen [ADDR][:PORT]] [--password SECRET]
              [--name NAME] [--remote-name NAME] [--verbose]
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

from clipshare.constants import (
    APP_NAME,
    CONFIG_DIR_ENVVAR,
    DEFAULT_HISTORY_SIZE,
    DEFAULT_LISTEN,
    DEFAULT_NAME,
    DEFAULT_REMOTE_NAME,
    DEFAULT_WATCH_INTERVAL,
)
from clipshare.main_logging import configure_logging
from clipshare.main_options import LISTEN_ADDRESS, PEER_URL

if TYPE_CHECKING:
    from clipshare.config import Settings

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--listen",
    "-l",
    type=LISTEN_ADDRESS,
    help=f"Address and port to listen on. Default: {DEFAULT_LISTEN}",
)
@click.option(
    "--remote",
    "-r",
    type=PEER_URL,
    help="URL of remote peer to share clipboard with.",
)
@click.option(
    "--password",
    "-p",
    help="Password used to authenticate with remote peer. Use - to read it from stdin.",
)
@click.option(
    "--name",
    help=f"Name of the local server, selects its key and certificate. Default: {DEFAULT_NAME}",
)
@click.option(
    "--remote-name",
    help=f"Name of the remote peer, selects its pinned certificate. Default: {DEFAULT_REMOTE_NAME}",
)
@click.option(
    "--interval",
    type=click.FloatRange(min=0, min_open=True),
    help=f"Seconds between clipboard polls. Default: {DEFAULT_WATCH_INTERVAL}",
)
@click.option(
    "--history-size",
    type=click.IntRange(min=2),
    help=f"Number of clipboard changes to remember. Default: {DEFAULT_HISTORY_SIZE}",
)
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar=CONFIG_DIR_ENVVAR,
    help="Directory holding config.toml and certs/.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable DEBUG-level logging",
)
@click.version_option(package_name=APP_NAME)
def main(
    listen: str | None,
    remote: str | None,
    password: str | None,
    name: str | None,
    remote_name: str | None,
    interval: float | None,
    history_size: int | None,
    config_dir: Path | None,
    verbose: bool,
) -> None:
    """Share the clipboard with a remote peer over HTTPS."""
    from clipshare.config import default_config_dir, resolve_settings
    from clipshare.errors import ConfigError, UnsupportedBackendError

    configure_logging(verbose)

    options = {
        "listen": listen,
        "remote": remote,
        "password": password,
        "name": name,
        "remote_name": remote_name,
        "interval": interval,
        "history_size": history_size,
    }
    try:
        settings = resolve_settings(
            options,
            config_dir or default_config_dir(),
            ask_password=_prompt_password if sys.stdin.isatty() else None,
            read_password=_read_password_stdin,
        )
        settings.check_files()
        _run(settings)
    except (ConfigError, UnsupportedBackendError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _prompt_password() -> str:
    """Ask for the shared secret on the terminal."""
    return click.prompt(f"{APP_NAME} password", hide_input=True, default="", show_default=False)


def _read_password_stdin() -> str:
    """Read the shared secret from the first line of stdin."""
    return click.get_text_stream("stdin").readline().rstrip("\r\n")


def _run(settings: Settings) -> None:
    """Detect the clipboard backend and run the sync loop until shutdown.

    A SIGINT that stopped the server surfaces here as KeyboardInterrupt
    once cleanup has finished; it is a normal shutdown.

    Args:
        settings: The resolved Settings.
    """
    import asyncio

    from clipshare.clipboard_probe import detect_backend
    from clipshare.sync_loop import run_sync_loop

    backend = detect_backend()
    try:
        asyncio.run(run_sync_loop(settings, backend))
    except KeyboardInterrupt:
        logger.info("Interrupted, shut down")
