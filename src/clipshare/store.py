#!/usr/bin/env python3
"""Serialized clipboard access with change history.

ClipboardStore is the only component that talks to the clipboard backend.
An asyncio.Lock guarantees that at most one backend command (read or
write) is in flight at any time, and every value-changing operation is
recorded in the store's History.

Critical ordering: after a backend write the lock stays held for the
settle delay. Some backends make their own write visible to readers
asynchronously; releasing the lock early would let the polling loop read
that echo and classify it as an external change.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from clipshare.constants import DEFAULT_HISTORY_SIZE, SETTLE_DELAY
from clipshare.errors import BackendError
from clipshare.history import Action, History, HistoryEntry, Source

if TYPE_CHECKING:
    from clipshare.clipboard_backend import ClipboardBackend

logger = logging.getLogger(__name__)


class ClipboardStore:
    """
    Clipboard front end owning one History and one lock.

    Attributes:
        backend: The clipboard backend selected at startup.
        history: Newest-first log of clipboard changes.
        settle_delay: Seconds the lock is held after a backend write.
    """

    def __init__(
        self,
        backend: ClipboardBackend,
        history_size: int = DEFAULT_HISTORY_SIZE,
        settle_delay: float = SETTLE_DELAY,
    ) -> None:
        self.backend = backend
        self.history = History(history_size)
        self.settle_delay = settle_delay
        self._lock = asyncio.Lock()

    @property
    def current(self) -> HistoryEntry | None:
        return self.history.current

    @property
    def prev(self) -> HistoryEntry | None:
        return self.history.prev

    @property
    def value(self) -> str | None:
        """Last known clipboard text, or None before the first change."""
        current = self.history.current
        return current.value if current is not None else None

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    async def write(self, value: str, source: Source = Source.SELF) -> str:
        """Write value to the clipboard unless it is already current.

        Writing the current value is a successful no-op: no history entry
        is added and the backend is not called. Otherwise the entry is
        recorded before the backend write and is kept even if the write
        fails, so history reflects intent rather than confirmed success.

        Args:
            value: New clipboard text.
            source: Origin of the change, SELF or REMOTE.

        Returns:
            The value.

        Raises:
            BackendError: If the backend write fails.
        """
        async with self._lock:
            logger.debug("Clipboard write (%s): %d chars", Source(source).value, len(value))
            if value == self.value:
                return value
            self.history.append(value, Action.WRITE, source)
            try:
                await self.backend.write(value)
            except BackendError as e:
                logger.error("Clipboard write failed: %s", e)
                raise
            await asyncio.sleep(self.settle_delay)
            return value

    async def read(self, source: Source = Source.SYSTEM) -> str:
        """Read the clipboard, recording the value if it changed.

        Args:
            source: Origin to record if the value changed.

        Returns:
            The clipboard text as reported by the backend.

        Raises:
            BackendError: If the backend read fails. Nothing is recorded.
        """
        async with self._lock:
            try:
                value, diagnostic = await self.backend.read()
            except BackendError as e:
                logger.error("Clipboard read failed: %s", e)
                raise
            if diagnostic:
                logger.debug("Clipboard read diagnostic: %s", diagnostic.strip())
            if value == self.value:
                return value
            self.history.append(value, Action.READ, source)
            return value
