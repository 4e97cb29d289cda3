"""QuickFile Recall - recency-ordered editor history with a searchable picker"""

from quickfile_recall.core.models import HistoryEntry, RecallItem, ResourceUri
from quickfile_recall.history.store import EditorHistory

__version__ = "0.1.0"
__all__ = [
    "EditorHistory",
    "HistoryEntry",
    "RecallItem",
    "ResourceUri",
]
