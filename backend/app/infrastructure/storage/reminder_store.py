"""
Reminder Store Implementations
In-memory, JSON file and Redis backed key/value slots for reminders.

All three keep the whole list as one JSON string under a single key.
"""
import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional

import redis.asyncio as redis
from pydantic import ValidationError
from redis.exceptions import RedisError

from app.domain.interfaces.reminder_store import ReminderStore, ReminderStoreError
from app.domain.models.reminder import Reminder

logger = logging.getLogger(__name__)


def _decode(raw: Optional[str]) -> List[Reminder]:
    """Decode a stored JSON list into reminders"""
    if not raw:
        return []
    try:
        items = json.loads(raw)
        if not isinstance(items, list):
            raise ReminderStoreError("Stored reminders are not a list")
        return [Reminder.model_validate(item) for item in items]
    except (json.JSONDecodeError, ValidationError) as e:
        raise ReminderStoreError(f"Corrupt reminder data: {e}") from e


def _encode(reminders: List[Reminder]) -> str:
    return json.dumps([r.to_wire() for r in reminders], ensure_ascii=False)


class InMemoryReminderStore(ReminderStore):
    """Process-local store, used for tests and when nothing is configured"""

    def __init__(self, reminders: Optional[List[Reminder]] = None):
        self._reminders: List[Reminder] = list(reminders or [])

    async def get_all(self) -> List[Reminder]:
        return list(self._reminders)

    async def save_all(self, reminders: List[Reminder]) -> None:
        self._reminders = list(reminders)


class JsonFileReminderStore(ReminderStore):
    """
    JSON file with a single top-level key.

    Writes go to a temp file in the same directory and are renamed over
    the existing file so a crash never leaves a half-written file. File
    access runs in the default executor to keep the event loop free.
    """

    def __init__(self, path: str):
        self.path = Path(path)

    def _read_document(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            raise ReminderStoreError(f"Cannot read {self.path}: {e}") from e
        if not content.strip():
            return {}
        try:
            document = json.loads(content)
        except json.JSONDecodeError as e:
            raise ReminderStoreError(f"Corrupt reminder file {self.path}: {e}") from e
        if not isinstance(document, dict):
            raise ReminderStoreError(f"Unexpected reminder file layout in {self.path}")
        return document

    def _write_document(self, document: dict) -> None:
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                try:
                    os.unlink(tmp_path)
                except OSError as cleanup_error:
                    logger.warning(f"Could not remove temp file {tmp_path}: {cleanup_error}")
            raise ReminderStoreError(f"Cannot write {self.path}: {e}") from e

    def _load_sync(self) -> List[Reminder]:
        return _decode(self._read_document().get(self.STORAGE_KEY))

    def _save_sync(self, reminders: List[Reminder]) -> None:
        document = self._read_document()
        document[self.STORAGE_KEY] = _encode(reminders)
        self._write_document(document)

    async def get_all(self) -> List[Reminder]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._load_sync)

    async def save_all(self, reminders: List[Reminder]) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._save_sync, list(reminders))
        logger.debug(f"Saved {len(reminders)} reminders to {self.path}")


class RedisReminderStore(ReminderStore):
    """Reminders kept under one Redis string key"""

    def __init__(self, client: redis.Redis, key: Optional[str] = None):
        self._client = client
        self.key = key or self.STORAGE_KEY

    @classmethod
    def from_url(cls, redis_url: str, key: Optional[str] = None) -> "RedisReminderStore":
        client = redis.from_url(redis_url, encoding="utf-8", decode_responses=True)
        return cls(client, key)

    async def get_all(self) -> List[Reminder]:
        try:
            raw = await self._client.get(self.key)
        except RedisError as e:
            raise ReminderStoreError(f"Redis read failed: {e}") from e
        return _decode(raw)

    async def save_all(self, reminders: List[Reminder]) -> None:
        try:
            await self._client.set(self.key, _encode(reminders))
        except RedisError as e:
            raise ReminderStoreError(f"Redis write failed: {e}") from e

    async def close(self) -> None:
        await self._client.close()
        logger.info("Reminder store Redis connection closed")


def create_reminder_store(backend: str, path: Optional[str] = None, redis_url: Optional[str] = None) -> ReminderStore:
    """
    Create a reminder store for the configured backend.

    Args:
        backend: "memory", "file" or "redis"
        path: JSON file path for the file backend
        redis_url: Connection URL for the redis backend
    """
    if backend == "memory":
        return InMemoryReminderStore()
    if backend == "file":
        if not path:
            raise ValueError("File reminder store requires a path")
        return JsonFileReminderStore(path)
    if backend == "redis":
        if not redis_url:
            raise ValueError("Redis reminder store requires redis_url")
        return RedisReminderStore.from_url(redis_url)
    raise ValueError(f"Unknown reminder store backend: {backend}. Available: memory, file, redis")
