"""Persistent record models."""

from recsweep.models.history import HistoryEntry, HistoryItem, entry_from_report

__all__ = ["HistoryEntry", "HistoryItem", "entry_from_report"]
