"""Tests for loading and saving editor history."""

import json

import pytest

from quickfile_recall.core.exceptions import ErrorCode
from quickfile_recall.core.models import HistoryEntry, ResourceUri
from quickfile_recall.history.persistence import HISTORY_STORAGE_KEY, HistoryPersistence, decode_records
from quickfile_recall.history.store import EditorHistory


def break_storage(tmp_path):
    """Put a regular file where the data directory should be"""
    (tmp_path / "data").write_text("not a directory")


class TestLoad:
    @pytest.mark.asyncio
    async def test_load_empty_store(self, persistence):
        result = await persistence.load()
        assert result.is_ok()
        assert result.unwrap() == []

    @pytest.mark.asyncio
    async def test_round_trip(self, persistence, uri, clock):
        history = EditorHistory(clock=clock)
        history.touch(uri("a.py"))
        clock.advance()
        history.touch(uri("b.py"))

        saved = await persistence.save(history)
        assert saved.unwrap() == 2

        loaded = (await persistence.load()).unwrap()
        assert loaded == history.entries

    @pytest.mark.asyncio
    async def test_stored_record_shape(self, persistence, state, uri):
        history = EditorHistory([HistoryEntry(uri("a b.py"), 42)])
        await persistence.save(history)

        stored = (await state.get(HISTORY_STORAGE_KEY)).unwrap()
        assert stored == [{"resourceString": "file:///work/a%20b.py", "timestamp": 42}]

    @pytest.mark.asyncio
    async def test_invalid_elements_are_dropped(self, persistence, state):
        await state.set(
            HISTORY_STORAGE_KEY,
            [
                {"resourceString": "bad://", "timestamp": "x"},
                {"resourceString": "file:///a", "timestamp": 123},
            ],
        )

        loaded = (await persistence.load()).unwrap()

        assert loaded == [HistoryEntry(ResourceUri("file", "/a"), 123)]

    @pytest.mark.asyncio
    async def test_unusable_timestamp_gets_load_time(self, persistence, state, clock):
        await state.set(
            HISTORY_STORAGE_KEY,
            [
                {"resourceString": "file:///a", "timestamp": "yesterday"},
                {"resourceString": "file:///b"},
            ],
        )

        loaded = (await persistence.load()).unwrap()

        assert [entry.timestamp for entry in loaded] == [clock.now, clock.now]

    @pytest.mark.asyncio
    async def test_legacy_uri_string_key(self, persistence, state):
        await state.set(HISTORY_STORAGE_KEY, [{"uriString": "file:///legacy.txt", "timestamp": 7}])

        loaded = (await persistence.load()).unwrap()

        assert loaded == [HistoryEntry(ResourceUri("file", "/legacy.txt"), 7)]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [{"resourceString": "file:///a"}, "file:///a", 3])
    async def test_non_list_record_loads_empty(self, persistence, state, value):
        await state.set(HISTORY_STORAGE_KEY, value)
        assert (await persistence.load()).unwrap() == []

    @pytest.mark.asyncio
    async def test_read_failure_is_err(self, tmp_path, clock):
        from quickfile_recall.storage.store import WorkspaceState

        break_storage(tmp_path)
        persistence = HistoryPersistence(WorkspaceState(tmp_path / "data", tmp_path), clock=clock)

        result = await persistence.load()

        assert result.is_err()
        assert result.code == ErrorCode.STORE_READ_FAILED
        assert result.unwrap_or([]) == []

    @pytest.mark.asyncio
    async def test_non_utf8_store_loads_empty(self, persistence, state):
        path = state._get_path(*state._key)
        path.parent.mkdir(parents=True)
        path.write_bytes(b'{"editor_history": "\xff\xfe"}')

        result = await persistence.load()

        assert result.is_ok()
        assert result.unwrap() == []

    @pytest.mark.asyncio
    async def test_out_of_range_timestamp_gets_load_time(self, persistence, state, clock):
        await state.set(
            HISTORY_STORAGE_KEY,
            [
                {"resourceString": "file:///work/a.py", "timestamp": 1e20},
                {"resourceString": "file:///work/b.py", "timestamp": -1e20},
            ],
        )

        loaded = (await persistence.load()).unwrap()

        assert [entry.timestamp for entry in loaded] == [clock.now, clock.now]


class TestSave:
    @pytest.mark.asyncio
    async def test_save_overwrites(self, persistence, uri, clock):
        history = EditorHistory(clock=clock)
        history.touch(uri("a"))
        await persistence.save(history)
        history.clear()
        history.touch(uri("b"))
        await persistence.save(history)

        loaded = (await persistence.load()).unwrap()
        assert [entry.resource for entry in loaded] == [uri("b")]

    @pytest.mark.asyncio
    async def test_write_failure_is_reported_not_raised(self, tmp_path, uri, clock):
        from quickfile_recall.storage.store import WorkspaceState

        break_storage(tmp_path)
        persistence = HistoryPersistence(WorkspaceState(tmp_path / "data", tmp_path), clock=clock)
        history = EditorHistory(clock=clock)
        history.touch(uri("a"))

        result = await persistence.save(history)

        assert result.is_err()
        assert result.code == ErrorCode.STORE_WRITE_FAILED
        assert len(history) == 1

    @pytest.mark.asyncio
    async def test_corrupt_history_is_not_saved(self, persistence, state, uri, clock):
        history = EditorHistory(clock=clock)
        history.touch(uri("a"))
        await persistence.save(history)
        history._entries = "garbage"  # type: ignore[assignment]

        result = await persistence.save(history)

        assert result.is_err()
        assert result.code == ErrorCode.HISTORY_UNAVAILABLE
        assert len((await state.get(HISTORY_STORAGE_KEY)).unwrap()) == 1

    @pytest.mark.asyncio
    async def test_custom_key(self, state, uri, clock):
        persistence = HistoryPersistence(state, clock=clock, key="other")
        history = EditorHistory(clock=clock)
        history.touch(uri("a"))
        await persistence.save(history)

        assert (await state.get("other")).unwrap() is not None
        assert (await state.get(HISTORY_STORAGE_KEY)).unwrap() is None


class TestDecodeRecords:
    def test_non_dict_elements_are_dropped(self):
        entries = decode_records([None, "file:///a", {"resourceString": "file:///b", "timestamp": 1}], now=0)
        assert [entry.resource.path for entry in entries] == ["/b"]

    def test_non_finite_timestamp_uses_now(self):
        raw = json.loads('[{"resourceString": "file:///a", "timestamp": Infinity}]')
        entries = decode_records(raw, now=55)
        assert entries[0].timestamp == 55
