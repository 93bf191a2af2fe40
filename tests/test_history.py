#!/usr/bin/env python3
"""
Unit tests for History and HistoryEntry.

Tests capacity enforcement, newest-first ordering, current/prev access
and entry immutability.
"""
import dataclasses
from datetime import timezone

import pytest

from clipshare.history import Action, History, HistoryEntry, Source


def test_history_rejects_capacity_below_two() -> None:
    """Test History refuses a capacity that cannot hold current and prev."""
    with pytest.raises(ValueError):
        History(1)


def test_history_starts_empty() -> None:
    """Test a new History has no current or prev entry."""
    history = History(2)
    assert len(history) == 0
    assert history.current is None
    assert history.prev is None


def test_history_append_puts_newest_first() -> None:
    """Test append inserts at position 0."""
    history = History(5)
    history.append("a", Action.WRITE, Source.SELF)
    history.append("b", Action.READ, Source.SYSTEM)
    assert [entry.value for entry in history] == ["b", "a"]
    assert history.current.value == "b"
    assert history.prev.value == "a"
    assert history[0] is history.current


def test_history_evicts_oldest_when_full() -> None:
    """Test length never exceeds cap and the oldest entry is dropped."""
    history = History(3)
    for value in "abcdef":
        history.append(value, Action.READ, Source.SYSTEM)
        assert len(history) <= 3
    assert [entry.value for entry in history] == ["f", "e", "d"]


def test_history_append_returns_entry_with_fields() -> None:
    """Test append returns the recorded entry with a UTC timestamp."""
    history = History(2)
    entry = history.append("text", "write", "remote")
    assert entry.value == "text"
    assert entry.action is Action.WRITE
    assert entry.source is Source.REMOTE
    assert entry.timestamp.tzinfo is timezone.utc


def test_history_entry_is_immutable() -> None:
    """Test HistoryEntry cannot be modified after creation."""
    entry = HistoryEntry(value="x", action=Action.READ, source=Source.SYSTEM)
    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.value = "y"  # type: ignore[misc]


def test_history_rejects_unknown_source() -> None:
    """Test append refuses a source tag outside self/remote/system."""
    history = History(2)
    with pytest.raises(ValueError):
        history.append("x", Action.READ, "elsewhere")
    assert len(history) == 0
