#!/usr/bin/env python3
"""Settings resolution for clipshare.

Settings come from three places, in decreasing precedence: command-line
options, the config file, and built-in defaults. The config file is
<config dir>/config.toml; the same directory holds the certs/ folder with
the local key and certificate and the pinned peer certificate:

    certs/<name>.key
    certs/<name>.cert
    certs/<remote_name>.pem

The resolved values are frozen into a Settings instance. The sync core
only ever sees those plain values.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

import click

from clipshare.constants import (
    APP_NAME,
    CONFIG_DIR_ENVVAR,
    CONFIG_FILE_NAME,
    DEFAULT_HISTORY_SIZE,
    DEFAULT_HOST,
    DEFAULT_LISTEN,
    DEFAULT_NAME,
    DEFAULT_PORT,
    DEFAULT_REMOTE_NAME,
    DEFAULT_WATCH_INTERVAL,
    MIN_HISTORY_SIZE,
)
from clipshare.errors import ConfigError

CONFIG_KEYS = frozenset(
    {"listen", "remote", "password", "name", "remote_name", "interval", "history_size"}
)


@dataclass(frozen=True)
class Settings:
    """Fully resolved runtime settings.

    Attributes:
        host: Address the HTTPS server listens on.
        port: Port the HTTPS server listens on.
        remote: URL of the peer, always https.
        password: Shared secret sent to and expected from the peer.
        name: Local instance name, selects the server key and certificate.
        remote_name: Peer instance name, selects the pinned certificate.
        interval: Seconds between clipboard polls.
        history_size: Capacity of the clipboard history.
        config_dir: Directory holding config.toml and certs/.
    """

    host: str
    port: int
    remote: str
    password: str
    name: str
    remote_name: str
    interval: float
    history_size: int
    config_dir: Path

    @property
    def certs_dir(self) -> Path:
        return self.config_dir / "certs"

    @property
    def keyfile(self) -> Path:
        return self.certs_dir / f"{self.name}.key"

    @property
    def certfile(self) -> Path:
        return self.certs_dir / f"{self.name}.cert"

    @property
    def peer_certfile(self) -> Path:
        return self.certs_dir / f"{self.remote_name}.pem"

    def check_files(self) -> None:
        """Raise ConfigError unless every certificate and key file exists."""
        for path in (self.keyfile, self.certfile, self.peer_certfile):
            if not path.is_file():
                raise ConfigError(f"Missing file: {path}")


def default_config_dir() -> Path:
    """Return the config directory from the environment or the platform default."""
    override = os.environ.get(CONFIG_DIR_ENVVAR)
    if override:
        return Path(override)
    return Path(click.get_app_dir(APP_NAME))


def parse_listen(value: str) -> tuple[str, int]:
    """Split an [addr][:port] listen address.

    Args:
        value: Listen address, e.g. "0.0.0.0:47880", ":9000" or "localhost".

    Returns:
        Tuple of (host, port) with defaults filled in.

    Raises:
        ValueError: If the address cannot be parsed.
    """
    parts = urlsplit(f"https://{value}")
    if parts.path or parts.query or parts.fragment or parts.username:
        raise ValueError(f"Invalid listen address: {value}")
    port = parts.port
    return parts.hostname or DEFAULT_HOST, port if port is not None else DEFAULT_PORT


def normalize_remote(value: str) -> str:
    """Turn a peer address into an https URL.

    Addresses without an http(s) scheme get https:// prepended. Plain
    http is refused.

    Args:
        value: Peer URL or host[:port].

    Returns:
        The https URL.

    Raises:
        ValueError: If the URL is insecure or has no host.
    """
    parts = urlsplit(value)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        parts = urlsplit(f"https://{value}")
    if parts.scheme != "https":
        raise ValueError(f"Refusing to connect to insecure remote: {value}")
    if not parts.hostname:
        raise ValueError(f"Invalid remote: {value}")
    return parts.geturl()


def load_config_file(config_dir: Path) -> dict[str, Any]:
    """Read config.toml from config_dir.

    A missing file is an empty configuration.

    Raises:
        ConfigError: If the file cannot be parsed or has unknown keys.
    """
    path = config_dir / CONFIG_FILE_NAME
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    unknown = set(data) - CONFIG_KEYS
    if unknown:
        raise ConfigError(f"Unknown keys in {path}: {', '.join(sorted(unknown))}")
    return data


def resolve_settings(
    options: Mapping[str, Any],
    config_dir: Path,
    ask_password: Callable[[], str] | None = None,
    read_password: Callable[[], str] | None = None,
) -> Settings:
    """Merge command-line options over the config file and defaults.

    Options whose value is None count as not given.

    Args:
        options: Values from the command line, keyed like CONFIG_KEYS.
        config_dir: Directory holding config.toml and certs/.
        ask_password: Called for the password when no source provides one.
        read_password: Called for the password when its value is "-",
            whether that came from the command line or the config file.

    Returns:
        The resolved Settings.

    Raises:
        ConfigError: If a required setting is missing or a value is invalid.
    """
    merged: dict[str, Any] = {
        "listen": DEFAULT_LISTEN,
        "name": DEFAULT_NAME,
        "remote_name": DEFAULT_REMOTE_NAME,
        "interval": DEFAULT_WATCH_INTERVAL,
        "history_size": DEFAULT_HISTORY_SIZE,
    }
    merged.update(load_config_file(config_dir))
    merged.update({k: v for k, v in options.items() if v is not None})

    for key in ("listen", "remote"):
        if not merged.get(key):
            raise ConfigError(f"Missing option: {key}")
    if merged.get("password") == "-":
        if read_password is None:
            raise ConfigError("Cannot read password from stdin")
        merged["password"] = read_password()
    if not merged.get("password") and ask_password is not None:
        merged["password"] = ask_password()
    if not merged.get("password"):
        raise ConfigError("expected password")
    # Sent verbatim as an HTTP header value
    if not str(merged["password"]).isascii():
        raise ConfigError("password must contain only ASCII characters")

    try:
        host, port = parse_listen(str(merged["listen"]))
        remote = normalize_remote(str(merged["remote"]))
        interval = float(merged["interval"])
        history_size = int(merged["history_size"])
    except (TypeError, ValueError) as e:
        raise ConfigError(str(e)) from e

    if interval <= 0:
        raise ConfigError(f"interval must be positive, got {interval}")
    if history_size < MIN_HISTORY_SIZE:
        raise ConfigError(
            f"history_size must be greater than or equal to {MIN_HISTORY_SIZE}, got {history_size}"
        )

    return Settings(
        host=host,
        port=port,
        remote=remote,
        password=str(merged["password"]),
        name=str(merged["name"]),
        remote_name=str(merged["remote_name"]),
        interval=interval,
        history_size=history_size,
        config_dir=config_dir,
    )
