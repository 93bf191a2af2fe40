#!/usr/bin/env python3
"""HTTPS endpoint receiving clipboard content from the peer.

The peer POSTs {"data": "<text>"} to / with the shared secret in the
Authorization header. Requests are authenticated before the body is
parsed; a missing or mismatched secret gets an empty 401 and never
touches the clipboard.

Usage:
    app = create_app(state, secret)
    await serve(app, host, port, certfile, keyfile)
"""

from __future__ import annotations

import hmac
import logging
import sys
from typing import TYPE_CHECKING

import uvicorn
from fastapi import FastAPI, Request, Response
from pydantic import BaseModel

from clipshare.errors import AuthError
from clipshare.sync_handlers import handle_incoming_content

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from pathlib import Path

    from clipshare.sync_state import SyncState

logger = logging.getLogger(__name__)


class ClipboardPayload(BaseModel):
    """Body of a clipboard push from the peer."""

    data: str | None = None


def check_authorization(header: str | None, secret: str) -> None:
    """Compare the Authorization header with the shared secret.

    Args:
        header: Raw Authorization header value, or None if absent.
        secret: The shared secret.

    Raises:
        AuthError: If the header is absent or does not match exactly.
    """
    if not header:
        raise AuthError("Missing Authorization")
    if not hmac.compare_digest(header.encode("utf-8"), secret.encode("utf-8")):
        raise AuthError("Invalid Authorization")


def create_app(state: SyncState, secret: str) -> FastAPI:
    """Build the ASGI application serving the peer endpoint.

    Args:
        state: The clipboard synchronization state.
        secret: Shared secret expected in the Authorization header.

    Returns:
        The FastAPI application.
    """
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)

    @app.middleware("http")
    async def authenticate(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        client = request.client.host if request.client else "unknown"
        logger.info("%s %s [%s]", request.method, request.url.path, client)
        try:
            check_authorization(request.headers.get("authorization"), secret)
        except AuthError as e:
            logger.error("%s", e)
            return Response(status_code=401)
        return await call_next(request)

    @app.post("/")
    async def receive_clipboard(payload: ClipboardPayload) -> Response:
        await handle_incoming_content(state, payload.data)
        return Response(status_code=200)

    return app


async def serve(
    app: FastAPI,
    host: str,
    port: int,
    certfile: str | Path,
    keyfile: str | Path,
) -> None:
    """Serve app over TLS until the process is asked to stop.

    uvicorn installs its own SIGINT/SIGTERM handlers and returns once
    shutdown has completed.

    Args:
        app: The application from create_app().
        host: Address to listen on.
        port: Port to listen on.
        certfile: PEM certificate presented to the peer.
        keyfile: Private key matching certfile.
    """
    config = uvicorn.Config(
        app,
        host=host,
        port=port,
        ssl_certfile=str(certfile),
        ssl_keyfile=str(keyfile),
        access_log=False,
        log_config=None,
        log_level="warning",
    )
    server = uvicorn.Server(config)
    print_startup_message(host, port)
    await server.serve()


def print_startup_message(host: str, port: int) -> None:
    """Print the listen address to stderr."""
    print(f"Listening on {host}:{port}", file=sys.stderr)
