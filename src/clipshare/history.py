#!/usr/bin/env python3
"""
Bounded clipboard change history.

Every value-changing read or write performed by a ClipboardStore is
recorded here as a HistoryEntry. The history is ordered newest first and
never grows beyond its capacity: appending to a full history evicts the
oldest entry.

The source tag on each entry is what drives echo suppression:
- self: written by this process on its own behalf
- remote: written by this process on behalf of the peer
- system: observed by the polling loop, i.e. changed by someone else
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from clipshare.constants import MIN_HISTORY_SIZE

logger = logging.getLogger(__name__)


class Action(str, Enum):
    """Store operation that produced an entry."""

    READ = "read"
    WRITE = "write"


class Source(str, Enum):
    """Origin of a clipboard change."""

    SELF = "self"
    REMOTE = "remote"
    SYSTEM = "system"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class HistoryEntry:
    """
    A single recorded clipboard change.

    Attributes:
        value: Clipboard text after the change.
        action: Whether the change was observed by a read or made by a write.
        source: Who caused the change.
        timestamp: When the entry was created (UTC).
    """

    value: str
    action: Action
    source: Source
    timestamp: datetime = field(default_factory=_utcnow)


class History:
    """
    Newest-first log of HistoryEntry with a fixed capacity.

    Index 0 is always the most recently appended entry. The log is only
    ever mutated through append().
    """

    def __init__(self, cap: int) -> None:
        if cap < MIN_HISTORY_SIZE:
            raise ValueError(
                f"History capacity must be greater than or equal to {MIN_HISTORY_SIZE}, got {cap}"
            )
        self.cap = cap
        self._entries: deque[HistoryEntry] = deque(maxlen=cap)

    def append(self, value: str, action: Action, source: Source) -> HistoryEntry:
        """
        Record a new entry at the front, evicting the oldest if full.

        Args:
            value: Clipboard text after the change.
            action: Store operation that produced the change.
            source: Origin of the change.

        Returns:
            The newly created entry.
        """
        entry = HistoryEntry(value=value, action=Action(action), source=Source(source))
        self._entries.appendleft(entry)
        logger.debug(
            "History push: action=%s source=%s length=%d",
            entry.action.value, entry.source.value, len(self._entries),
        )
        return entry

    @property
    def current(self) -> HistoryEntry | None:
        """Most recent entry, or None if nothing was recorded yet."""
        return self._entries[0] if self._entries else None

    @property
    def prev(self) -> HistoryEntry | None:
        """Entry before the current one, or None."""
        return self._entries[1] if len(self._entries) > 1 else None

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> HistoryEntry:
        return self._entries[index]

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"History(cap={self.cap}, entries={list(self._entries)!r})"
