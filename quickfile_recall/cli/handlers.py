"""Terminal host handlers using Click, Rich and Textual.

This module provides the concrete host collaborators for the ``qfr`` CLI:
notifications on a Rich console, a workspace rooted at a directory, and a
window that shows the Textual picker and opens files in the user's editor.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Iterable, List, Optional

import click
from rich.console import Console
from rich.markup import escape

from quickfile_recall.core.exceptions import ErrorCode
from quickfile_recall.core.models import RecallItem, ResourceUri
from quickfile_recall.core.result import Err, Ok, Result
from quickfile_recall.interfaces.host import Window, Workspace, relative_to_root
from quickfile_recall.interfaces.io import Notification, NotificationHandler, NotificationType


logger = logging.getLogger(__name__)


class CLINotificationHandler(NotificationHandler):
    """Rich-based notification handler for CLI applications.

    Notifications go to stderr so that ``qfr recall --print-path`` keeps
    stdout clean for shell integration.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    def show(self, notification: Notification) -> None:
        """Display a notification with color coding."""
        color_map = {
            NotificationType.INFO: "cyan",
            NotificationType.WARNING: "yellow",
            NotificationType.ERROR: "red",
        }
        color = color_map.get(notification.notification_type, "white")

        self.console.print(f"[{color}]{escape(notification.message)}[/{color}]", highlight=False)


class CLIWorkspace(Workspace):
    """Workspace rooted at a directory.

    A terminal has no notion of open editors, so the open resources are the
    files the caller reports explicitly (``--open``).
    """

    def __init__(self, root: Path, open_files: Iterable[Path] = ()) -> None:
        self.root = Path(root).expanduser().resolve()
        self._open = [ResourceUri.file(path) for path in open_files]

    def open_resources(self) -> List[ResourceUri]:
        return list(self._open)

    def as_relative_path(self, resource: ResourceUri) -> str:
        return relative_to_root(self.root, resource)


class TerminalWindow(Window):
    """Window backed by the terminal.

    The picker is a Textual app. Opening a document launches the configured
    editor (Click picks ``$VISUAL``/``$EDITOR`` when none is configured), or,
    with ``print_only``, writes the path to stdout for the calling shell.
    """

    def __init__(
        self,
        active: Optional[Path] = None,
        editor: Optional[str] = None,
        print_only: bool = False,
    ) -> None:
        self._active = ResourceUri.file(active) if active else None
        self.editor = editor
        self.print_only = print_only

    def active_resource(self) -> Optional[ResourceUri]:
        return self._active

    async def show_quick_pick(
        self, items: List[RecallItem], placeholder: str
    ) -> Optional[RecallItem]:
        from quickfile_recall.tui.app import RecallPickerApp

        return await RecallPickerApp(items, placeholder).run_async()

    async def open_document(self, resource: ResourceUri) -> Result[ResourceUri]:
        path = resource.fs_path
        if not resource.is_file or not path.is_file():
            return Err(f"{resource} is not an existing file", code=ErrorCode.OPEN_FAILED)

        if self.print_only:
            click.echo(str(path))
        else:
            logger.debug(f"Opening {path} in {self.editor or 'the default editor'}")
            try:
                await asyncio.to_thread(click.edit, filename=str(path), editor=self.editor)
            except click.ClickException as e:
                return Err(e.format_message(), code=ErrorCode.OPEN_FAILED)

        self._active = resource
        return Ok(resource)
