"""Editor history: the MRU store, its persistence and the flows that mutate it."""

from quickfile_recall.history.persistence import HISTORY_STORAGE_KEY, HistoryPersistence
from quickfile_recall.history.recall import RecallCommand, build_recall_items, format_timestamp
from quickfile_recall.history.reconcile import (
    ReconcileReport,
    merge_open_resources,
    prune_missing,
    reconcile_on_startup,
)
from quickfile_recall.history.store import EditorHistory
from quickfile_recall.history.tracker import AccessTracker, TrackerState

__all__ = [
    "HISTORY_STORAGE_KEY",
    "AccessTracker",
    "EditorHistory",
    "HistoryPersistence",
    "RecallCommand",
    "ReconcileReport",
    "TrackerState",
    "build_recall_items",
    "format_timestamp",
    "merge_open_resources",
    "prune_missing",
    "reconcile_on_startup",
]
