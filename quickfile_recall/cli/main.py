"""QuickFile Recall CLI interface."""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from quickfile_recall import __version__
from quickfile_recall.cli.handlers import CLINotificationHandler, CLIWorkspace, TerminalWindow
from quickfile_recall.core.exceptions import ConfigError
from quickfile_recall.core.models import ResourceUri
from quickfile_recall.core.settings import Settings, load_settings
from quickfile_recall.extension import RecallExtension
from quickfile_recall.history.recall import build_recall_items
from quickfile_recall.interfaces.host import LocalFileSystem
from quickfile_recall.interfaces.io import Notification, NotificationType
from quickfile_recall.storage.store import WorkspaceState

console = Console()

logger = logging.getLogger(__name__)


@dataclass
class CLIContext:
    workspace: Path
    settings: Settings


def configure_logging(level: str) -> None:
    """Send log records to stderr through Rich"""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def run_async(coro: Any) -> Any:
    """Helper to run async function in sync context"""
    try:
        return asyncio.run(coro)
    except KeyboardInterrupt:
        sys.exit(130)


def build_extension(
    ctx: CLIContext,
    active: Optional[Path] = None,
    open_files: Iterable[Path] = (),
    print_only: bool = False,
) -> RecallExtension:
    """Wire a RecallExtension to the terminal host"""
    return RecallExtension(
        settings=ctx.settings,
        state=WorkspaceState(ctx.settings.storage_dir_path(), ctx.workspace),
        fs=LocalFileSystem(),
        workspace=CLIWorkspace(ctx.workspace, open_files),
        window=TerminalWindow(active=active, editor=ctx.settings.editor, print_only=print_only),
        notifications=CLINotificationHandler(),
    )


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--workspace",
    "-w",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Workspace directory (default: current directory)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, workspace: Path, verbose: bool) -> None:
    """QuickFile Recall - jump back to recently opened files"""
    try:
        settings = load_settings(workspace)
    except ConfigError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    configure_logging("DEBUG" if verbose or settings.debug else settings.log_level)
    ctx.obj = CLIContext(workspace=workspace.expanduser().resolve(), settings=settings)
    logger.debug(f"Workspace {ctx.obj.workspace}, history stored under {settings.storage_dir}")


@cli.command()
@click.option(
    "--active",
    type=click.Path(dir_okay=False, path_type=Path),
    help="File open in the active editor; left out of the picker",
)
@click.option(
    "--open",
    "open_files",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="File the editor already has open (repeatable)",
)
@click.option("--print-path", is_flag=True, help="Print the chosen path instead of editing it")
@click.pass_obj
def recall(
    obj: CLIContext,
    active: Optional[Path],
    open_files: Tuple[Path, ...],
    print_path: bool,
) -> None:
    """Pick a file from history and open it"""

    async def _recall() -> bool:
        extension = build_extension(obj, active=active, open_files=open_files, print_only=print_path)
        await extension.activate()
        try:
            result = await extension.recall()
            if result.is_ok():
                await extension.on_active_resource_changed(result.unwrap())
        finally:
            await extension.deactivate()
        return not result.is_err()

    if not run_async(_recall()):
        sys.exit(1)


@cli.command(name="open")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--print-path", is_flag=True, help="Print the path instead of editing it")
@click.pass_obj
def open_file(obj: CLIContext, path: Path, print_path: bool) -> None:
    """Record PATH as the active file and open it"""

    async def _open() -> bool:
        extension = build_extension(obj, print_only=print_path)
        await extension.activate()
        resource = ResourceUri.file(path)
        try:
            await extension.on_active_resource_changed(resource)
            opened = await extension.window.open_document(resource)
        finally:
            await extension.deactivate()

        if opened.is_err():
            relative = extension.workspace.as_relative_path(resource)
            extension.notifications.show(
                Notification(NotificationType.ERROR, f"Failed to open {relative}")
            )
            return False
        return True

    if not run_async(_open()):
        sys.exit(1)


@cli.command()
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.pass_obj
def track(obj: CLIContext, paths: Tuple[Path, ...]) -> None:
    """Record each PATH, in order, as the active file (editor hook)"""

    async def _track() -> None:
        extension = build_extension(obj)
        await extension.activate()
        try:
            for path in paths:
                await extension.on_active_resource_changed(ResourceUri.file(path))
        finally:
            await extension.deactivate()

    run_async(_track())


@cli.command(name="list")
@click.pass_obj
def list_history(obj: CLIContext) -> None:
    """List history, most recent first"""

    async def _list() -> None:
        extension = build_extension(obj)
        await extension.activate()
        await extension.deactivate()

        items = build_recall_items(extension.history.entries, None, extension.workspace)
        if not items:
            console.print("[yellow]History is empty.[/yellow]")
            return

        table = Table()
        table.add_column("#", style="dim", justify="right")
        table.add_column("File", style="cyan")
        table.add_column("Path", style="green")
        table.add_column("Last opened", style="dim")

        for index, item in enumerate(items, start=1):
            table.add_row(str(index), escape(item.label), escape(item.description), item.detail)

        console.print(table)

    run_async(_list())


@cli.command()
@click.pass_obj
def prune(obj: CLIContext) -> None:
    """Drop history entries whose files no longer exist"""

    async def _prune() -> None:
        extension = build_extension(obj)
        await extension.activate()
        report = await extension.ready()
        await extension.deactivate()

        pruned = len(report.pruned) if report else 0
        console.print(f"Pruned {pruned} entries; {len(extension.history)} remain.")

    run_async(_prune())


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
