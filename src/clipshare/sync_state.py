#!/usr/bin/env python3
"""Clipboard synchronization state.

This module provides the SyncState dataclass that groups everything the
outbound and inbound sync handlers need: the local clipboard store, the
client used to reach the peer, and the set of outbound deliveries that
are still in flight.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clipshare.peer_client import PeerClient
    from clipshare.store import ClipboardStore


@dataclass
class SyncState:
    """State for clipboard synchronization with one peer.

    Attributes:
        store: The local clipboard store.
        peer: Client delivering local changes to the peer.
        pending: Detached delivery tasks not yet finished. Holding the
            references keeps the tasks alive until they complete.
    """

    store: ClipboardStore
    peer: PeerClient
    pending: set[asyncio.Task[None]] = field(default_factory=set)
