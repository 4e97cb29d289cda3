"""Shared fixtures: in-memory fakes for the host collaborators."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional

import pytest

from quickfile_recall.core.exceptions import ErrorCode
from quickfile_recall.core.models import RecallItem, ResourceUri
from quickfile_recall.core.result import Err, Ok, Result
from quickfile_recall.history.persistence import HistoryPersistence
from quickfile_recall.interfaces.host import relative_to_root
from quickfile_recall.interfaces.io import Notification
from quickfile_recall.storage.store import WorkspaceState

WORKSPACE_ROOT = "/work"
START_MS = 1_700_000_000_000


class FakeClock:
    """Deterministic millisecond clock"""

    def __init__(self, start: int = START_MS):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int = 1000) -> int:
        self.now += ms
        return self.now


class FakeFileSystem:
    """FileSystem whose existing and failing resources are set by the test"""

    def __init__(self) -> None:
        self.existing: set[ResourceUri] = set()
        self.failing: set[ResourceUri] = set()
        self.calls: List[ResourceUri] = []

    def add(self, *resources: ResourceUri) -> None:
        self.existing.update(resources)

    def delete(self, *resources: ResourceUri) -> None:
        self.existing.difference_update(resources)

    async def stat(self, resource: ResourceUri) -> Result[ResourceUri]:
        self.calls.append(resource)
        if resource in self.failing:
            return Err(f"Permission denied: {resource}", code=ErrorCode.STAT_FAILED)
        if resource in self.existing:
            return Ok(resource)
        return Err(f"{resource} does not exist", code=ErrorCode.NOT_FOUND)


class FakeWorkspace:
    def __init__(self, root: str = WORKSPACE_ROOT) -> None:
        self.root = Path(root)
        self.open: List[ResourceUri] = []

    def open_resources(self) -> List[ResourceUri]:
        return list(self.open)

    def as_relative_path(self, resource: ResourceUri) -> str:
        return relative_to_root(self.root, resource)


class FakeWindow:
    """Window that records picker calls and opened documents"""

    def __init__(self) -> None:
        self.active: Optional[ResourceUri] = None
        self.pick: Callable[[List[RecallItem]], Optional[RecallItem]] = (
            lambda items: items[0] if items else None
        )
        self.shown: List[tuple[List[RecallItem], str]] = []
        self.opened: List[ResourceUri] = []
        self.unopenable: set[ResourceUri] = set()

    def active_resource(self) -> Optional[ResourceUri]:
        return self.active

    async def show_quick_pick(
        self, items: List[RecallItem], placeholder: str
    ) -> Optional[RecallItem]:
        self.shown.append((items, placeholder))
        return self.pick(items)

    async def open_document(self, resource: ResourceUri) -> Result[ResourceUri]:
        if resource in self.unopenable:
            return Err(f"Cannot open {resource}", code=ErrorCode.OPEN_FAILED)
        self.opened.append(resource)
        self.active = resource
        return Ok(resource)


class RecordingNotifications:
    def __init__(self) -> None:
        self.notifications: List[Notification] = []

    def show(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def messages(self) -> List[str]:
        return [notification.message for notification in self.notifications]


@pytest.fixture
def uri() -> Callable[[str], ResourceUri]:
    """Factory for file resources under the fake workspace root"""

    def _uri(name: str) -> ResourceUri:
        return ResourceUri(scheme="file", path=f"{WORKSPACE_ROOT}/{name}")

    return _uri


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fs() -> FakeFileSystem:
    return FakeFileSystem()


@pytest.fixture
def workspace() -> FakeWorkspace:
    return FakeWorkspace()


@pytest.fixture
def window() -> FakeWindow:
    return FakeWindow()


@pytest.fixture
def notifications() -> RecordingNotifications:
    return RecordingNotifications()


@pytest.fixture
def state(tmp_path: Path) -> WorkspaceState:
    project = tmp_path / "project"
    project.mkdir()
    return WorkspaceState(tmp_path / "data", project)


@pytest.fixture
def persistence(state: WorkspaceState, clock: FakeClock) -> HistoryPersistence:
    return HistoryPersistence(state, clock=clock)
