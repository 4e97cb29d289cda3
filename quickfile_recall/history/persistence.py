"""Load and save editor history to a workspace-scoped key/value slot.

History is a convenience feature: a damaged record must never cost the user
their editing session. Loading drops what it cannot understand element by
element, and saving reports failures as results instead of raising.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List

from pydantic import ValidationError

from quickfile_recall.core.exceptions import (
    ErrorCode,
    HistoryUnavailableError,
    InvalidResourceError,
)
from quickfile_recall.core.models import HistoryEntry, PersistedEntry, ResourceUri, now_ms
from quickfile_recall.core.result import Err, Ok, Result
from quickfile_recall.history.store import EditorHistory
from quickfile_recall.storage.store import WorkspaceState


logger = logging.getLogger(__name__)

HISTORY_STORAGE_KEY = "editor_history"


def decode_records(raw: List[Any], now: int) -> List[HistoryEntry]:
    """Turn a stored record list into entries, dropping invalid elements.

    Args:
        raw: The stored list.
        now: Timestamp given to elements whose own timestamp is unusable.
    """
    entries: List[HistoryEntry] = []
    for index, item in enumerate(raw):
        try:
            record = PersistedEntry.model_validate(item)
            resource = ResourceUri.parse(record.resource_string)
        except (ValidationError, InvalidResourceError) as e:
            logger.warning(f"Dropping invalid history record #{index}: {e}")
            continue

        timestamp = record.timestamp if record.timestamp is not None else now
        entries.append(HistoryEntry(resource=resource, timestamp=timestamp))
    return entries


class HistoryPersistence:
    """Reads and writes the PersistedRecord for one workspace"""

    def __init__(
        self,
        state: WorkspaceState,
        clock: Callable[[], int] = now_ms,
        key: str = HISTORY_STORAGE_KEY,
    ):
        self._state = state
        self._clock = clock
        self.key = key

    async def load(self) -> Result[List[HistoryEntry]]:
        """Load the stored history.

        Returns:
            Ok(entries), possibly empty when nothing usable is stored, or
            Err(STORE_READ_FAILED) when the store itself could not be read.
        """
        read = await self._state.get(self.key)
        if read.is_err():
            logger.error(f"Could not read stored editor history: {read}")
            return read

        raw = read.unwrap()
        if raw is None:
            logger.debug("No stored editor history found")
            return Ok([])
        if not isinstance(raw, list):
            logger.warning(
                f"Stored editor history is a {type(raw).__name__}, not a list; starting empty"
            )
            return Ok([])

        entries = decode_records(raw, now=self._clock())
        logger.debug(f"Loaded {len(entries)} of {len(raw)} stored history entries")
        return Ok(entries)

    async def save(self, history: EditorHistory) -> Result[int]:
        """Overwrite the stored history with the current snapshot.

        Returns:
            Ok(number of entries written), or Err when the snapshot or the
            write failed. Never raises.
        """
        try:
            records = [entry.to_record() for entry in history.entries]
        except HistoryUnavailableError as e:
            logger.error(f"Not saving editor history: {e}")
            return Err(str(e), code=ErrorCode.HISTORY_UNAVAILABLE)

        written = await self._state.set(self.key, records)
        if written.is_err():
            logger.error(f"Error saving editor history state: {written}")
            return written  # type: ignore[return-value]
        return Ok(len(records))
