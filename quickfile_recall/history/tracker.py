"""Access tracking: record every change of the active resource."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Iterable, Optional

from quickfile_recall.core.exceptions import ErrorCode, HistoryUnavailableError
from quickfile_recall.core.models import HistoryEntry, ResourceUri
from quickfile_recall.core.result import Err, Ok, Pass, Result
from quickfile_recall.history.persistence import HistoryPersistence
from quickfile_recall.history.reconcile import TRACKED_SCHEMES
from quickfile_recall.history.store import EditorHistory


logger = logging.getLogger(__name__)


class TrackerState(str, Enum):
    IDLE = "idle"
    UPDATING = "updating"


class AccessTracker:
    """Applies touch-then-save for each active-resource notification.

    Notifications are handled strictly one after another in the order they
    arrive; a touch and its save complete before the next touch starts.
    """

    def __init__(
        self,
        history: EditorHistory,
        persistence: HistoryPersistence,
        tracked_schemes: Iterable[str] = TRACKED_SCHEMES,
    ):
        self._history = history
        self._persistence = persistence
        self._tracked_schemes = frozenset(tracked_schemes)
        self._lock = asyncio.Lock()
        self.state = TrackerState.IDLE

    def is_tracked(self, resource: Optional[ResourceUri]) -> bool:
        return resource is not None and resource.scheme in self._tracked_schemes

    async def on_active_resource_changed(
        self, resource: Optional[ResourceUri]
    ) -> Result[HistoryEntry]:
        """Record that resource became the active one.

        Returns:
            Ok(new entry); Pass when there is no active resource or it is not
            a concrete file; Err(HISTORY_UNAVAILABLE) if the store is corrupt.
            Save failures are logged and do not change the outcome.
        """
        if not self.is_tracked(resource):
            return Pass(f"Not tracking {resource}" if resource else "No active resource")

        async with self._lock:
            self.state = TrackerState.UPDATING
            try:
                entry = self._history.touch(resource)  # type: ignore[arg-type]
                if entry is None:
                    return Pass(f"Not tracking {resource!r}")

                saved = await self._persistence.save(self._history)
                if saved.is_err():
                    logger.warning(f"History updated in memory only for {resource}: {saved}")
                return Ok(entry)
            except HistoryUnavailableError as e:
                logger.error(f"Error inside active editor listener: {e}")
                return Err(str(e), code=ErrorCode.HISTORY_UNAVAILABLE)
            finally:
                self.state = TrackerState.IDLE
