"""
Unit tests for reminder stores
Tests the JSON file layout, corruption handling and the Redis backend
"""
import asyncio
import json
import os
import pytest
from datetime import date
from unittest.mock import AsyncMock

from redis.exceptions import ConnectionError as RedisConnectionError

from app.domain.interfaces.reminder_store import ReminderStore, ReminderStoreError
from app.domain.models.reminder import Reminder
from app.infrastructure.storage.reminder_store import (
    InMemoryReminderStore,
    JsonFileReminderStore,
    RedisReminderStore,
    create_reminder_store,
)


@pytest.fixture
def reminder():
    return Reminder(
        id="rem_1741948200000",
        lead_id="L004",
        actor="Sneha Reddy",
        actor_phone="+91 98765 43213",
        commitment="Send salary slips",
        due_date=date(2025, 3, 15),
        created_date=date(2025, 3, 14),
    )


class TestJsonFileReminderStore:
    """Tests for the JSON file store"""

    @pytest.mark.asyncio
    async def test_missing_file_is_empty(self, tmp_path):
        store = JsonFileReminderStore(str(tmp_path / "reminders.json"))
        assert await store.get_all() == []

    @pytest.mark.asyncio
    async def test_save_and_load(self, tmp_path, reminder):
        """Test saved reminders load back equal"""
        store = JsonFileReminderStore(str(tmp_path / "reminders.json"))
        await store.save_all([reminder])

        assert await store.get_all() == [reminder]

    @pytest.mark.asyncio
    async def test_file_layout(self, tmp_path, reminder):
        """Test the list is stored as a JSON string under the storage key"""
        path = tmp_path / "reminders.json"
        await JsonFileReminderStore(str(path)).save_all([reminder])

        document = json.loads(path.read_text(encoding="utf-8"))
        stored = json.loads(document[ReminderStore.STORAGE_KEY])
        assert stored == [{
            "id": "rem_1741948200000",
            "leadId": "L004",
            "actor": "Sneha Reddy",
            "actorPhone": "+91 98765 43213",
            "commitment": "Send salary slips",
            "dueDate": "2025-03-15",
            "createdDate": "2025-03-14",
        }]

    @pytest.mark.asyncio
    async def test_other_keys_preserved(self, tmp_path, reminder):
        """Test unrelated keys in the file survive a save"""
        path = tmp_path / "reminders.json"
        path.write_text(json.dumps({"other": "value"}), encoding="utf-8")

        await JsonFileReminderStore(str(path)).save_all([reminder])

        assert json.loads(path.read_text(encoding="utf-8"))["other"] == "value"

    @pytest.mark.asyncio
    async def test_creates_parent_directory(self, tmp_path, reminder):
        path = tmp_path / "nested" / "dir" / "reminders.json"
        await JsonFileReminderStore(str(path)).save_all([reminder])
        assert path.exists()

    @pytest.mark.asyncio
    async def test_corrupt_file_raises(self, tmp_path):
        """Test unreadable JSON surfaces as ReminderStoreError"""
        path = tmp_path / "reminders.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ReminderStoreError):
            await JsonFileReminderStore(str(path)).get_all()

    @pytest.mark.asyncio
    async def test_corrupt_entry_raises(self, tmp_path):
        """Test an invalid stored entry surfaces as ReminderStoreError"""
        path = tmp_path / "reminders.json"
        path.write_text(
            json.dumps({ReminderStore.STORAGE_KEY: json.dumps([{"id": "rem_1"}])}),
            encoding="utf-8",
        )

        with pytest.raises(ReminderStoreError):
            await JsonFileReminderStore(str(path)).get_all()

    @pytest.mark.asyncio
    async def test_failed_write_removes_temp_file(self, tmp_path, reminder, monkeypatch):
        """Test a failed rename leaves neither a temp file nor a partial store"""
        path = tmp_path / "reminders.json"

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", failing_replace)

        with pytest.raises(ReminderStoreError):
            await JsonFileReminderStore(str(path)).save_all([reminder])

        assert list(tmp_path.glob("*.tmp")) == []
        assert not path.exists()

    @pytest.mark.asyncio
    async def test_failed_write_keeps_previous_file(self, tmp_path, reminder, monkeypatch):
        """Test the existing file is untouched when the write fails"""
        path = tmp_path / "reminders.json"
        store = JsonFileReminderStore(str(path))
        await store.save_all([reminder])
        before = path.read_text(encoding="utf-8")

        def failing_dump(*args, **kwargs):
            raise OSError("no space left on device")

        monkeypatch.setattr(json, "dump", failing_dump)

        with pytest.raises(ReminderStoreError):
            await store.save_all([])

        assert path.read_text(encoding="utf-8") == before
        assert list(tmp_path.glob("*.tmp")) == []

    @pytest.mark.asyncio
    async def test_file_access_runs_in_executor(self, tmp_path, reminder, monkeypatch):
        """Test reads and writes are handed to the loop executor"""
        loop = asyncio.get_running_loop()
        original = loop.run_in_executor
        submitted = []

        def tracking_run_in_executor(executor, func, *args):
            submitted.append(func.__name__)
            return original(executor, func, *args)

        monkeypatch.setattr(loop, "run_in_executor", tracking_run_in_executor)
        store = JsonFileReminderStore(str(tmp_path / "reminders.json"))

        await store.save_all([reminder])
        assert await store.get_all() == [reminder]

        assert submitted == ["_save_sync", "_load_sync"]


class TestInMemoryReminderStore:
    """Tests for the in-memory store"""

    @pytest.mark.asyncio
    async def test_returns_copies(self, reminder):
        """Test callers cannot mutate the stored list"""
        store = InMemoryReminderStore([reminder])
        (await store.get_all()).clear()

        assert await store.get_all() == [reminder]


class TestRedisReminderStore:
    """Tests for the Redis store with a mocked client"""

    @pytest.mark.asyncio
    async def test_get_all_empty(self):
        client = AsyncMock()
        client.get.return_value = None

        assert await RedisReminderStore(client).get_all() == []
        client.get.assert_awaited_once_with(ReminderStore.STORAGE_KEY)

    @pytest.mark.asyncio
    async def test_save_all_writes_json(self, reminder):
        """Test the whole list is written under one key"""
        client = AsyncMock()
        await RedisReminderStore(client, key="rm:reminders").save_all([reminder])

        key, raw = client.set.call_args.args
        assert key == "rm:reminders"
        assert json.loads(raw)[0]["leadId"] == "L004"

    @pytest.mark.asyncio
    async def test_round_trip_through_client(self, reminder):
        client = AsyncMock()
        store = RedisReminderStore(client)
        await store.save_all([reminder])
        client.get.return_value = client.set.call_args.args[1]

        assert await store.get_all() == [reminder]

    @pytest.mark.asyncio
    async def test_redis_error_wrapped(self):
        """Test connection failures surface as ReminderStoreError"""
        client = AsyncMock()
        client.get.side_effect = RedisConnectionError("refused")

        with pytest.raises(ReminderStoreError):
            await RedisReminderStore(client).get_all()

    @pytest.mark.asyncio
    async def test_close_releases_client(self):
        client = AsyncMock()

        await RedisReminderStore(client).close()

        client.close.assert_awaited_once()


class TestCreateReminderStore:
    """Tests for backend selection"""

    def test_memory(self):
        assert isinstance(create_reminder_store("memory"), InMemoryReminderStore)

    def test_file(self, tmp_path):
        store = create_reminder_store("file", path=str(tmp_path / "r.json"))
        assert isinstance(store, JsonFileReminderStore)

    def test_file_requires_path(self):
        with pytest.raises(ValueError):
            create_reminder_store("file")

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_reminder_store("sqlite")
