#!/usr/bin/env python3
"""Default values shared by the CLI, the store and the peer channel."""

# Default address the HTTPS server listens on, of the form [addr][:port].
DEFAULT_HOST: str = "localhost"
DEFAULT_PORT: int = 47880
DEFAULT_LISTEN: str = f"{DEFAULT_HOST}:{DEFAULT_PORT}"

# Names used to locate certs/<name>.key, certs/<name>.cert and
# certs/<remote_name>.pem under the configuration directory.
DEFAULT_NAME: str = "local"
DEFAULT_REMOTE_NAME: str = "remote"

# Seconds between clipboard polls once the watcher is active.
DEFAULT_WATCH_INTERVAL: float = 1.0

# Number of clipboard changes remembered by a store. Must be >= 2 so that
# both the current and the previous entry are available.
DEFAULT_HISTORY_SIZE: int = 10
MIN_HISTORY_SIZE: int = 2

# Seconds the store lock stays held after a backend write, so that a
# backend echoing its own write is not seen as an external change.
SETTLE_DELAY: float = 0.1

# Timeout in seconds for a single outbound request to the peer.
PEER_REQUEST_TIMEOUT: float = 5.0

# Name of the application directory and the config file inside it.
APP_NAME: str = "clipshare"
CONFIG_FILE_NAME: str = "config.toml"
CONFIG_DIR_ENVVAR: str = "CLIPSHARE_CONFIG_DIR"
