#!/usr/bin/env python3
"""Bidirectional clipboard synchronization coordination.

This module re-exports synchronization components from submodules for
convenient imports. The actual implementations are in:
- sync_state: SyncState dataclass
- sync_handlers: should_forward, handle_clipboard_change, handle_incoming_content
- sync_loop: run_sync_loop
"""

from clipshare.sync_handlers import (
    drain_pending,
    handle_clipboard_change,
    handle_incoming_content,
    should_forward,
)
from clipshare.sync_loop import run_sync_loop
from clipshare.sync_state import SyncState

__all__ = [
    "SyncState",
    "drain_pending",
    "handle_clipboard_change",
    "handle_incoming_content",
    "run_sync_loop",
    "should_forward",
]
