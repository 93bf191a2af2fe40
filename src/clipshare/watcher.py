#!/usr/bin/env python3
"""Clipboard change detection by polling.

The Watcher repeatedly reads the clipboard through a ClipboardStore and
calls every registered handler when the value changes. It is idle while
no handler is registered: registering the first handler schedules an
immediate tick to establish a baseline, and removing the last one cancels
the pending timer.

Ticks never overlap. The next tick is scheduled only once the previous
one has completed, including any time spent waiting for the store lock.
A failing backend read is logged and the loop carries on.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from clipshare.constants import DEFAULT_WATCH_INTERVAL
from clipshare.errors import BackendError, HandlerNotFoundError
from clipshare.history import HistoryEntry, Source

if TYPE_CHECKING:
    from clipshare.store import ClipboardStore

logger = logging.getLogger(__name__)

WatchHandler = Callable[[str, HistoryEntry | None], None]


@dataclass(frozen=True)
class WatchToken:
    """Opaque handle returned by Watcher.watch and accepted by unwatch."""

    _id: int

    def __repr__(self) -> str:
        return f"WatchToken({self._id})"


class Watcher:
    """
    Polls a ClipboardStore and fans out value changes to handlers.

    Attributes:
        store: The store polled on every tick.
        interval: Seconds between the end of one tick and the next.
    """

    def __init__(
        self, store: ClipboardStore, interval: float = DEFAULT_WATCH_INTERVAL
    ) -> None:
        self.store = store
        self.interval = interval
        self._handlers: dict[int, WatchHandler] = {}
        self._ids = itertools.count(1)
        self._timer: asyncio.TimerHandle | None = None
        self._tick_task: asyncio.Task[None] | None = None

    @property
    def active(self) -> bool:
        """True while a tick is pending or running."""
        return self._timer is not None or self._tick_task is not None

    def watch(self, handler: WatchHandler) -> WatchToken:
        """Register handler and start polling if the watcher is idle.

        Must be called from within a running event loop.

        Args:
            handler: Called as handler(new_value, current_entry) on change.

        Returns:
            Token to pass to unwatch().
        """
        handler_id = next(self._ids)
        self._handlers[handler_id] = handler
        if not self.active:
            self._schedule(0)
        return WatchToken(handler_id)

    def unwatch(self, token: WatchToken) -> None:
        """Remove a handler; stop polling when none are left.

        Raises:
            HandlerNotFoundError: If token is not registered.
        """
        handler_id = token._id
        if self._handlers.pop(handler_id, None) is None:
            raise HandlerNotFoundError(f"Handler not found: {handler_id}")
        if not self._handlers and self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def poll_once(self) -> None:
        """Read the clipboard once and notify handlers if it changed."""
        previous = self.store.value
        try:
            value = await self.store.read(source=Source.SYSTEM)
        except BackendError as e:
            logger.warning("Clipboard poll failed: %s", e)
            return
        if value == previous:
            return
        entry = self.store.current
        for handler_id, handler in list(self._handlers.items()):
            try:
                handler(value, entry)
            except Exception:
                logger.exception("Watch handler %d failed", handler_id)

    def _schedule(self, delay: float) -> None:
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(delay, self._start_tick)

    def _start_tick(self) -> None:
        self._timer = None
        self._tick_task = asyncio.get_running_loop().create_task(self._tick())

    async def _tick(self) -> None:
        try:
            await self.poll_once()
        finally:
            self._tick_task = None
            if self._handlers:
                self._schedule(self.interval)
