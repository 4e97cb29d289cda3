"""Top-level controller that owns the editor history for one workspace.

The controller holds the single EditorHistory instance and hands it by
reference to the tracker, the startup reconciliation and the recall command.

Persistence policy: history is written through on every live mutation
(access tracking and pruning). ``deactivate`` deliberately does not save;
teardown is not a reliable moment to write, and every state worth keeping
has already been written by the mutation that produced it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from quickfile_recall.core.models import HistoryEntry, ResourceUri, now_ms
from quickfile_recall.core.result import Result
from quickfile_recall.core.settings import Settings
from quickfile_recall.history.persistence import HistoryPersistence
from quickfile_recall.history.recall import RecallCommand
from quickfile_recall.history.reconcile import ReconcileReport, reconcile_on_startup
from quickfile_recall.history.store import EditorHistory
from quickfile_recall.history.tracker import AccessTracker
from quickfile_recall.interfaces.host import FileSystem, Window, Workspace
from quickfile_recall.interfaces.io import NoOpNotificationHandler, NotificationHandler
from quickfile_recall.storage.store import WorkspaceState


logger = logging.getLogger(__name__)

COMMAND_ID = "quickfile-recall.openPreviousEditorFromHistory"


class RecallExtension:
    """Wires history, persistence and host collaborators together"""

    def __init__(
        self,
        settings: Settings,
        state: WorkspaceState,
        fs: FileSystem,
        workspace: Workspace,
        window: Window,
        notifications: Optional[NotificationHandler] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.settings = settings
        self.fs = fs
        self.workspace = workspace
        self.window = window
        self.notifications = notifications if notifications is not None else NoOpNotificationHandler()
        self.clock = clock

        self.history = EditorHistory(max_size=settings.max_history_size, clock=clock)
        self.persistence = HistoryPersistence(state, clock=clock)
        self.tracker = AccessTracker(self.history, self.persistence)
        self.recall_command = RecallCommand(
            self.history, fs, self.persistence, workspace, window, self.notifications
        )
        self._startup: Optional[asyncio.Task[ReconcileReport]] = None

    async def activate(self) -> asyncio.Task[ReconcileReport]:
        """Load stored history and start reconciliation in the background.

        Returns:
            The reconciliation task; callers need not await it.
        """
        loaded = await self.persistence.load()
        if loaded.is_err():
            logger.error(f"Starting with empty editor history: {loaded}")
        self.history.replace(loaded.unwrap_or([]))
        logger.debug(f"Activated with {len(self.history)} history entries")

        self._startup = asyncio.create_task(
            reconcile_on_startup(
                self.history, self.fs, self.workspace, self.persistence, self.clock
            )
        )
        return self._startup

    async def ready(self) -> Optional[ReconcileReport]:
        """Wait for startup reconciliation to finish"""
        if self._startup is None:
            return None
        try:
            return await self._startup
        except Exception:
            logger.exception("Startup reconciliation failed")
            return None

    async def on_active_resource_changed(
        self, resource: Optional[ResourceUri]
    ) -> Result[HistoryEntry]:
        """Host notification: the active editor changed"""
        await self.ready()
        return await self.tracker.on_active_resource_changed(resource)

    async def recall(self) -> Result[ResourceUri]:
        """Run the recall command once reconciliation has completed"""
        await self.ready()
        return await self.recall_command.run()

    async def deactivate(self) -> None:
        """Release state. History is not saved here."""
        await self.ready()
        self._startup = None
