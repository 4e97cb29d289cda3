"""Host collaborator protocols.

The history core never talks to an editor directly. It consumes these
protocols, and each host (the terminal host in ``quickfile_recall.cli``, or
the fakes in the test suite) provides implementations.
"""

from __future__ import annotations

import errno
from pathlib import Path
from typing import List, Optional, Protocol, runtime_checkable

import aiofiles.os

from quickfile_recall.core.exceptions import ErrorCode
from quickfile_recall.core.models import RecallItem, ResourceUri
from quickfile_recall.core.result import Err, Ok, Result


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for resource existence checks."""

    async def stat(self, resource: ResourceUri) -> Result[ResourceUri]:
        """Check that a resource exists.

        Returns:
            Ok(resource) if it exists, Err with ErrorCode.NOT_FOUND when it is
            gone, or another Err code when the check itself failed.
        """
        ...


@runtime_checkable
class Workspace(Protocol):
    """Protocol for workspace-level queries."""

    def open_resources(self) -> List[ResourceUri]:
        """Resources the host currently has open, in host order."""
        ...

    def as_relative_path(self, resource: ResourceUri) -> str:
        """Path of resource relative to the workspace root, for display."""
        ...


@runtime_checkable
class Window(Protocol):
    """Protocol for the window: active editor, picker and document opener."""

    def active_resource(self) -> Optional[ResourceUri]:
        """Resource of the currently active editor, if any."""
        ...

    async def show_quick_pick(
        self, items: List[RecallItem], placeholder: str
    ) -> Optional[RecallItem]:
        """Let the user search and choose one item.

        Returns:
            The chosen item, or None if the picker was dismissed.
        """
        ...

    async def open_document(self, resource: ResourceUri) -> Result[ResourceUri]:
        """Open resource as the active document.

        Returns:
            Ok(resource) on success, Err with ErrorCode.OPEN_FAILED otherwise.
        """
        ...


class LocalFileSystem(FileSystem):
    """FileSystem backed by the local disk."""

    async def stat(self, resource: ResourceUri) -> Result[ResourceUri]:
        if not resource.is_file:
            return Err(
                f"Cannot stat {resource}: unsupported scheme '{resource.scheme}'",
                code=ErrorCode.UNSUPPORTED_SCHEME,
            )

        try:
            await aiofiles.os.stat(resource.fs_path)
        except FileNotFoundError:
            return Err(f"{resource.fs_path} does not exist", code=ErrorCode.NOT_FOUND)
        except OSError as e:
            if e.errno == errno.ENOTDIR:
                return Err(f"{resource.fs_path} does not exist", code=ErrorCode.NOT_FOUND)
            return Err(
                f"Cannot stat {resource.fs_path}: {e.strerror or e}",
                code=ErrorCode.STAT_FAILED,
                retryable=True,
            )
        return Ok(resource)


def relative_to_root(root: Path, resource: ResourceUri) -> str:
    """Workspace-relative POSIX path, or the full path outside the root"""
    if not resource.is_file:
        return str(resource)
    try:
        return resource.fs_path.relative_to(root).as_posix()
    except ValueError:
        return resource.path
