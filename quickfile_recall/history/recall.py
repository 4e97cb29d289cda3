"""Recall command: pick a previously active file and open it again."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import pendulum

from quickfile_recall.core.exceptions import ErrorCode, HistoryUnavailableError
from quickfile_recall.core.models import HistoryEntry, RecallItem, ResourceUri, Timestamp
from quickfile_recall.core.result import Err, Ok, Pass, Result
from quickfile_recall.history.persistence import HistoryPersistence
from quickfile_recall.history.reconcile import prune_missing
from quickfile_recall.history.store import EditorHistory
from quickfile_recall.interfaces.host import FileSystem, Window, Workspace
from quickfile_recall.interfaces.io import Notification, NotificationHandler, NotificationType


logger = logging.getLogger(__name__)

NO_HISTORY_MESSAGE = "No other editors in history available."
UNAVAILABLE_MESSAGE = "Editor history is currently unavailable."
PICKER_PLACEHOLDER = "Search editor history (most recent first)"
UNKNOWN_TIME = "--:-- ----------"


def format_timestamp(timestamp: Timestamp, tz: Optional[str] = None) -> str:
    """Format milliseconds since the epoch as ``HH:mm YYYY-MM-DD``.

    Uses the local timezone unless tz names another one. A timestamp outside
    the range of calendar dates formats as UNKNOWN_TIME.
    """
    zone = pendulum.timezone(tz) if tz else pendulum.local_timezone()
    try:
        moment = pendulum.from_timestamp(timestamp / 1000, tz=zone)
    except (OverflowError, OSError, ValueError):
        logger.warning(f"Cannot format timestamp {timestamp!r}")
        return UNKNOWN_TIME
    return moment.format("HH:mm YYYY-MM-DD")


def build_recall_items(
    entries: Sequence[HistoryEntry],
    active: Optional[ResourceUri],
    workspace: Workspace,
    tz: Optional[str] = None,
) -> List[RecallItem]:
    """Picker rows, most recent first, without the active resource"""
    return [
        RecallItem(
            label=entry.resource.basename,
            description=workspace.as_relative_path(entry.resource),
            detail=format_timestamp(entry.timestamp, tz),
            resource=entry.resource,
        )
        for entry in reversed(entries)
        if entry.resource != active
    ]


class RecallCommand:
    """The user-facing "open previous file from history" action"""

    def __init__(
        self,
        history: EditorHistory,
        fs: FileSystem,
        persistence: HistoryPersistence,
        workspace: Workspace,
        window: Window,
        notifications: NotificationHandler,
    ):
        self._history = history
        self._fs = fs
        self._persistence = persistence
        self._workspace = workspace
        self._window = window
        self._notifications = notifications

    async def run(self) -> Result[ResourceUri]:
        """Prune, show the picker, and open the chosen resource.

        Returns:
            Ok(opened resource); Pass when there was nothing to show or the
            picker was dismissed; Err when history is unavailable or the
            chosen resource could not be opened.
        """
        try:
            await prune_missing(self._history, self._fs, self._persistence)
            entries = self._history.entries
        except HistoryUnavailableError as e:
            logger.error(f"Recall aborted: {e}")
            self._notify(NotificationType.ERROR, UNAVAILABLE_MESSAGE)
            return Err(str(e), code=ErrorCode.HISTORY_UNAVAILABLE)

        active = self._window.active_resource()
        items = build_recall_items(entries, active, self._workspace)
        logger.debug(f"Recall offering {len(items)} of {len(entries)} history entries")

        if not items:
            self._notify(NotificationType.INFO, NO_HISTORY_MESSAGE)
            return Pass(NO_HISTORY_MESSAGE)

        selected = await self._window.show_quick_pick(items, PICKER_PLACEHOLDER)
        if selected is None:
            return Pass("Recall dismissed")

        opened = await self._window.open_document(selected.resource)
        if opened.is_err():
            logger.error(f"Error opening document {selected.resource}: {opened}")
            relative = self._workspace.as_relative_path(selected.resource)
            self._notify(NotificationType.ERROR, f"Failed to open {relative}")
            return Err(f"Failed to open {relative}", code=ErrorCode.OPEN_FAILED)

        return Ok(selected.resource)

    def _notify(self, notification_type: NotificationType, message: str) -> None:
        self._notifications.show(Notification(notification_type=notification_type, message=message))
