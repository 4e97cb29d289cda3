"""Tests for the recall command and picker row building."""

import pytest

from quickfile_recall.core.exceptions import ErrorCode
from quickfile_recall.core.models import HistoryEntry, ResourceUri
from quickfile_recall.core.result import Err
from quickfile_recall.history.recall import (
    NO_HISTORY_MESSAGE,
    PICKER_PLACEHOLDER,
    UNAVAILABLE_MESSAGE,
    UNKNOWN_TIME,
    RecallCommand,
    build_recall_items,
    format_timestamp,
)
from quickfile_recall.history.store import EditorHistory
from quickfile_recall.interfaces.io import NotificationType


@pytest.fixture
def history(clock):
    return EditorHistory(clock=clock)


@pytest.fixture
def command(history, fs, persistence, workspace, window, notifications):
    return RecallCommand(history, fs, persistence, workspace, window, notifications)


def seed(history, fs, uri, clock, *names):
    for name in names:
        history.touch(uri(name))
        fs.add(uri(name))
        clock.advance()


class TestFormatTimestamp:
    def test_format(self):
        assert format_timestamp(1_700_000_000_000, tz="UTC") == "22:13 2023-11-14"

    def test_other_zone(self):
        assert format_timestamp(0, tz="Asia/Tokyo") == "09:00 1970-01-01"

    def test_float_timestamp(self):
        assert format_timestamp(60_000.5, tz="UTC") == "00:01 1970-01-01"

    @pytest.mark.parametrize("timestamp", [1e20, -1e20, 10**30])
    def test_out_of_range_timestamp(self, timestamp):
        assert format_timestamp(timestamp, tz="UTC") == UNKNOWN_TIME


class TestBuildRecallItems:
    def test_most_recent_first_without_active(self, uri, workspace):
        entries = [HistoryEntry(uri("A"), 1), HistoryEntry(uri("B"), 2), HistoryEntry(uri("C"), 3)]

        items = build_recall_items(entries, uri("A"), workspace, tz="UTC")

        assert [item.resource for item in items] == [uri("C"), uri("B")]

    def test_item_fields(self, workspace):
        entry = HistoryEntry(ResourceUri("file", "/work/src/app.py"), 0)

        (item,) = build_recall_items([entry], None, workspace, tz="UTC")

        assert item.label == "app.py"
        assert item.description == "src/app.py"
        assert item.detail == "00:00 1970-01-01"

    def test_outside_workspace_shows_full_path(self, workspace):
        entry = HistoryEntry(ResourceUri("file", "/elsewhere/notes.md"), 0)
        (item,) = build_recall_items([entry], None, workspace, tz="UTC")
        assert item.description == "/elsewhere/notes.md"


class TestRecallCommand:
    @pytest.mark.asyncio
    async def test_offers_history_and_opens_choice(self, command, history, fs, window, uri, clock):
        seed(history, fs, uri, clock, "A", "B", "C")
        window.active = uri("A")
        window.pick = lambda items: items[1]

        result = await command.run()

        items, placeholder = window.shown[0]
        assert [item.resource for item in items] == [uri("C"), uri("B")]
        assert placeholder == PICKER_PLACEHOLDER
        assert result.unwrap() == uri("B")
        assert window.opened == [uri("B")]

    @pytest.mark.asyncio
    async def test_empty_history_shows_message(self, command, window, notifications):
        result = await command.run()

        assert result.is_pass()
        assert window.shown == []
        assert notifications.messages == [NO_HISTORY_MESSAGE]
        assert notifications.notifications[0].notification_type == NotificationType.INFO

    @pytest.mark.asyncio
    async def test_only_active_in_history_shows_message(self, command, history, fs, window, notifications, uri, clock):
        seed(history, fs, uri, clock, "A")
        window.active = uri("A")

        result = await command.run()

        assert result.is_pass()
        assert window.shown == []
        assert notifications.messages == [NO_HISTORY_MESSAGE]

    @pytest.mark.asyncio
    async def test_prunes_before_listing(self, command, history, fs, window, uri, clock):
        seed(history, fs, uri, clock, "A", "B")
        fs.delete(uri("B"))

        await command.run()

        items, _ = window.shown[0]
        assert [item.resource for item in items] == [uri("A")]
        assert history.resources() == [uri("A")]

    @pytest.mark.asyncio
    async def test_dismissed_picker(self, command, history, fs, window, notifications, uri, clock):
        seed(history, fs, uri, clock, "A", "B")
        window.pick = lambda items: None

        result = await command.run()

        assert result.is_pass()
        assert window.opened == []
        assert notifications.messages == []

    @pytest.mark.asyncio
    async def test_open_failure_notifies_and_keeps_history(
        self, command, history, fs, window, notifications, uri, clock
    ):
        seed(history, fs, uri, clock, "A", "src/B.py")
        window.unopenable.add(uri("src/B.py"))
        before = history.entries

        result = await command.run()

        assert result.is_err()
        assert result.code == ErrorCode.OPEN_FAILED
        assert notifications.messages == ["Failed to open src/B.py"]
        assert notifications.notifications[0].notification_type == NotificationType.ERROR
        assert history.entries == before

    @pytest.mark.asyncio
    async def test_history_unavailable(self, command, history, window, notifications):
        history._entries = None  # type: ignore[assignment]

        result = await command.run()

        assert isinstance(result, Err)
        assert result.code == ErrorCode.HISTORY_UNAVAILABLE
        assert notifications.messages == [UNAVAILABLE_MESSAGE]
        assert window.shown == []

    @pytest.mark.asyncio
    async def test_out_of_range_timestamp_still_offered(self, command, history, fs, window, uri):
        history.replace([HistoryEntry(uri("a.py"), 1e20)])
        fs.add(uri("a.py"))

        result = await command.run()

        items, _ = window.shown[0]
        assert items[0].detail == UNKNOWN_TIME
        assert result.unwrap() == uri("a.py")
