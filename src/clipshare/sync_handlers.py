#!/usr/bin/env python3
"""Clipboard synchronization event handlers.

This module provides the two halves of the sync protocol:
- handle_clipboard_change: decide whether a local change goes to the peer
- handle_incoming_content: apply content pushed by the peer locally

Loop prevention relies on source tags. Content applied from the peer is
written with source REMOTE; when the watcher later reports that entry,
should_forward() refuses to send it back. Both peers apply the same rule,
so a value crosses the link at most once.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from clipshare.errors import BackendError, NetworkError
from clipshare.history import Source

if TYPE_CHECKING:
    from clipshare.history import HistoryEntry
    from clipshare.sync_state import SyncState

logger = logging.getLogger(__name__)

_SUPPRESSED_SOURCES = frozenset({Source.SELF, Source.REMOTE})


def should_forward(entry: HistoryEntry | None) -> bool:
    """Return True if a detected change should be sent to the peer.

    Changes written by this process (SELF) or applied from the peer
    (REMOTE) are never forwarded.

    Args:
        entry: The store's current entry when the change was detected.

    Returns:
        False for SELF and REMOTE entries, True otherwise.
    """
    if entry is None:
        return False
    return entry.source not in _SUPPRESSED_SOURCES


def handle_clipboard_change(
    state: SyncState, value: str, entry: HistoryEntry | None
) -> None:
    """Handle a change reported by the watcher.

    Delivery runs as a detached task so a slow or unreachable peer never
    delays the next poll. Its outcome is only logged: there is no retry
    and no backpressure.

    Args:
        state: The clipboard synchronization state.
        value: The new clipboard text.
        entry: The history entry describing the change.
    """
    source = entry.source.value if entry is not None else "unknown"
    logger.info("Clipboard event (%s)", source)
    logger.debug("Clipboard value: %r", value[:50])
    if not should_forward(entry):
        logger.debug("Skip forwarding %s change", source)
        return
    if not value:
        logger.debug("Clipboard is empty, skipping")
        return

    task = asyncio.get_running_loop().create_task(forward_to_peer(state, value))
    state.pending.add(task)
    task.add_done_callback(state.pending.discard)


async def forward_to_peer(state: SyncState, value: str) -> None:
    """Send value to the peer, logging instead of raising on failure.

    Runs as a detached task, so nothing would ever observe an exception
    it raised.

    Args:
        state: The clipboard synchronization state.
        value: The clipboard text to deliver.
    """
    try:
        await state.peer.send(value)
    except NetworkError as e:
        logger.warning("Remote: %s", e)
    except Exception:
        logger.exception("Remote: delivery failed")


async def handle_incoming_content(state: SyncState, value: str | None) -> bool:
    """Apply clipboard content received from the peer.

    The write is tagged REMOTE so the watcher's next report of it is not
    forwarded back.

    Args:
        state: The clipboard synchronization state.
        value: Clipboard text from the peer; empty or None is ignored.

    Returns:
        True if the content was applied, False if ignored or failed.
    """
    if not value:
        logger.debug("Received empty content from remote, ignoring")
        return False
    try:
        await state.store.write(value, source=Source.REMOTE)
    except BackendError as e:
        logger.error("Failed to apply remote content: %s", e)
        return False
    logger.debug("Received and set %d chars from remote", len(value))
    return True


async def drain_pending(state: SyncState) -> None:
    """Wait for every outbound delivery still in flight."""
    if state.pending:
        await asyncio.gather(*state.pending, return_exceptions=True)
