#!/usr/bin/env python3
"""Main synchronization loop.

This module provides the run_sync_loop function that wires the clipboard
store, the polling watcher, the peer client and the HTTPS endpoint
together for the lifetime of the process.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from clipshare.peer_client import PeerClient, create_pinned_ssl_context
from clipshare.server import create_app, serve
from clipshare.store import ClipboardStore
from clipshare.sync_handlers import drain_pending, handle_clipboard_change
from clipshare.sync_state import SyncState
from clipshare.watcher import Watcher

if TYPE_CHECKING:
    from clipshare.clipboard_backend import ClipboardBackend
    from clipshare.config import Settings

logger = logging.getLogger(__name__)


async def run_sync_loop(settings: Settings, backend: ClipboardBackend) -> None:
    """Synchronize the clipboard with the peer until shutdown.

    Starts polling the local clipboard, forwarding changes to the peer,
    and serving the endpoint the peer pushes its changes to. Returns once
    the HTTPS server has shut down (SIGINT/SIGTERM).

    Args:
        settings: The resolved runtime settings.
        backend: The clipboard backend selected at startup.
    """
    store = ClipboardStore(backend, history_size=settings.history_size)
    peer = PeerClient(
        settings.remote,
        settings.password,
        verify=create_pinned_ssl_context(settings.peer_certfile),
    )
    state = SyncState(store=store, peer=peer)
    watcher = Watcher(store, interval=settings.interval)

    token = watcher.watch(lambda value, entry: handle_clipboard_change(state, value, entry))
    try:
        await serve(
            create_app(state, settings.password),
            settings.host,
            settings.port,
            certfile=settings.certfile,
            keyfile=settings.keyfile,
        )
    finally:
        watcher.unwatch(token)
        # uvicorn re-raises SIGINT after serve() returns, which cancels this
        # task. Cleanup runs to completion regardless.
        cleanup = asyncio.ensure_future(_shutdown(state, peer))
        try:
            await asyncio.shield(cleanup)
        except asyncio.CancelledError:
            await cleanup
            raise


async def _shutdown(state: SyncState, peer: PeerClient) -> None:
    """Finish outbound deliveries and close the peer client."""
    await drain_pending(state)
    await peer.aclose()
    logger.debug("Sync loop stopped")
