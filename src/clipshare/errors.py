#!/usr/bin/env python3
"""Exception types for clipshare.

Only ConfigError and UnsupportedBackendError are fatal; they are raised
before the sync loop starts and turned into an exit code by the CLI. Every
other error is caught at the component boundary that detects it and
reduced to a log line.
"""


class ClipshareError(Exception):
    """Base class for all clipshare errors."""

    pass


class ConfigError(ClipshareError):
    """A required setting is absent or invalid at startup."""

    pass


class BackendError(ClipshareError):
    """A clipboard helper command could not be run or failed."""

    pass


class UnsupportedBackendError(BackendError):
    """No supported clipboard mechanism was detected for this session."""

    pass


class AuthError(ClipshareError):
    """Inbound request carried a missing or mismatched shared secret."""

    pass


class NetworkError(ClipshareError):
    """Outbound request to the peer failed or was rejected."""

    pass


class HandlerNotFoundError(ClipshareError, KeyError):
    """Raised by Watcher.unwatch for a token that is not registered."""

    def __str__(self) -> str:
        return Exception.__str__(self)
