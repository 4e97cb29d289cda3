"""In-memory MRU store of editor history entries.

Sequence order is the recency order: the first entry is the oldest and the
last entry is the most recently accessed. No other sort is ever applied.
Every mutation leaves at most one entry per resource and no more than
``max_size`` entries, evicting from the front.
"""

from __future__ import annotations

import logging
from typing import Callable, Collection, Iterable, Iterator, List, Optional

from quickfile_recall.core.exceptions import HistoryUnavailableError
from quickfile_recall.core.models import HistoryEntry, ResourceUri, Timestamp, now_ms
from quickfile_recall.core.settings import DEFAULT_MAX_HISTORY_SIZE


logger = logging.getLogger(__name__)


class EditorHistory:
    """Bounded, deduplicated, recency-ordered list of HistoryEntry"""

    def __init__(
        self,
        entries: Iterable[HistoryEntry] = (),
        max_size: int = DEFAULT_MAX_HISTORY_SIZE,
        clock: Callable[[], int] = now_ms,
    ):
        self._entries: List[HistoryEntry] = []
        self._max_size = DEFAULT_MAX_HISTORY_SIZE
        self._clock = clock
        self.max_size = max_size
        self.replace(entries)

    @property
    def max_size(self) -> int:
        return self._max_size

    @max_size.setter
    def max_size(self, value: int) -> None:
        self._max_size = max(1, int(value or DEFAULT_MAX_HISTORY_SIZE))
        if isinstance(self._entries, list):
            self.evict_overflow()

    @property
    def entries(self) -> List[HistoryEntry]:
        """Snapshot of the entries, oldest first.

        Raises:
            HistoryUnavailableError: If the backing sequence is corrupt.
        """
        return list(self._checked())

    def resources(self) -> List[ResourceUri]:
        return [entry.resource for entry in self._checked()]

    def __len__(self) -> int:
        return len(self._checked())

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self.entries)

    def __contains__(self, resource: object) -> bool:
        return self._index_of(resource) is not None

    def __repr__(self) -> str:
        size = len(self._entries) if isinstance(self._entries, list) else "?"
        return f"EditorHistory(size={size}, max_size={self._max_size})"

    def touch(
        self, resource: ResourceUri, timestamp: Optional[Timestamp] = None
    ) -> Optional[HistoryEntry]:
        """Move resource to the most recent position with a fresh timestamp.

        Returns:
            The new entry, or None when resource is not a ResourceUri.
        """
        if not isinstance(resource, ResourceUri):
            logger.debug(f"Ignoring touch of non-resource value: {resource!r}")
            return None

        entries = self._checked()
        index = self._index_of(resource)
        if index is not None:
            del entries[index]

        entry = HistoryEntry(
            resource=resource,
            timestamp=self._clock() if timestamp is None else timestamp,
        )
        entries.append(entry)
        self.evict_overflow()
        return entry

    def remove_nonexistent(self, missing: Collection[ResourceUri]) -> List[HistoryEntry]:
        """Drop entries whose resource failed the existence check.

        Survivors keep their relative order.

        Returns:
            The removed entries, oldest first.
        """
        if not missing:
            return []

        missing_set = set(missing)
        kept: List[HistoryEntry] = []
        removed: List[HistoryEntry] = []
        for entry in self._checked():
            (removed if entry.resource in missing_set else kept).append(entry)

        self._entries = kept
        return removed

    def merge(self, resources: Iterable[ResourceUri], timestamp: Timestamp) -> List[HistoryEntry]:
        """Append entries for resources not already present.

        All appended entries share ``timestamp`` and keep the input order.

        Returns:
            The entries that were added.
        """
        entries = self._checked()
        present = {entry.resource for entry in entries}
        added: List[HistoryEntry] = []

        for resource in resources:
            if not isinstance(resource, ResourceUri) or resource in present:
                continue
            entry = HistoryEntry(resource=resource, timestamp=timestamp)
            entries.append(entry)
            present.add(resource)
            added.append(entry)

        self.evict_overflow()
        return added

    def evict_overflow(self) -> List[HistoryEntry]:
        """Evict the oldest entries until the size bound holds."""
        entries = self._checked()
        overflow = len(entries) - self._max_size
        if overflow <= 0:
            return []

        evicted = entries[:overflow]
        del entries[:overflow]
        return evicted

    def replace(self, entries: Iterable[HistoryEntry]) -> None:
        """Hydrate the store, e.g. from persisted data.

        If a resource appears more than once, its last occurrence wins.
        """
        latest: dict[ResourceUri, HistoryEntry] = {}
        for entry in entries:
            if not isinstance(entry, HistoryEntry):
                continue
            latest.pop(entry.resource, None)
            latest[entry.resource] = entry

        self._entries = list(latest.values())
        self.evict_overflow()

    def clear(self) -> None:
        self._entries = []

    def _index_of(self, resource: object) -> Optional[int]:
        for index, entry in enumerate(self._checked()):
            if entry.resource == resource:
                return index
        return None

    def _checked(self) -> List[HistoryEntry]:
        if not isinstance(self._entries, list):
            raise HistoryUnavailableError(
                f"Editor history is corrupt: expected a list, got {type(self._entries).__name__}"
            )
        return self._entries
