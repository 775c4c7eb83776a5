"""Persistence helpers: an async key-value store and task (de)serialization.

The whole task list is stored as one JSON array string under a single
fixed key. The store itself is a JSON object on disk mapping keys to
string values, so other keys can live next to the task blob.
"""
from __future__ import annotations
import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set

from config import get_settings
from models import Task

logger = logging.getLogger(__name__)

TASKS_STORAGE_KEY = "@tasks_key"


class StorageError(Exception):
    """Raised when the backing file cannot be read, decoded or written."""


class CorruptStoreError(StorageError):
    """The backing file exists but does not hold a JSON object."""


class JsonFileStore:
    """Asynchronous key-value store backed by a single JSON file.

    Disk access runs in a worker thread. Writes are serialized through a
    lock, so concurrent ``set`` calls land in the order they were issued.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path: Path = Path(path) if path is not None else get_settings().data_file
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[str]:
        data = await asyncio.to_thread(self._read_all)
        return data.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read_for_update)
            data[key] = value
            await asyncio.to_thread(self._write_all, data)

    async def remove(self, key: str) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read_for_update)
            if data.pop(key, None) is not None:
                await asyncio.to_thread(self._write_all, data)

    # -------------------- file access --------------------
    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise StorageError(f"cannot read {self.path}: {e}") from e
        except ValueError as e:
            raise CorruptStoreError(f"cannot decode {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise CorruptStoreError(f"{self.path} does not hold a JSON object")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _read_for_update(self) -> Dict[str, str]:
        """Like _read_all, but an undecodable file is moved aside and treated as empty."""
        try:
            return self._read_all()
        except CorruptStoreError:
            backup = self.path.with_name(self.path.name + '.corrupt')
            logger.warning("Store %s is corrupt; moving it to %s and starting fresh",
                           self.path, backup, exc_info=True)
            try:
                os.replace(self.path, backup)
            except OSError as e:
                raise StorageError(f"cannot move corrupt {self.path} aside: {e}") from e
            return {}

    def _write_all(self, data: Dict[str, str]) -> None:
        tmp = self.path.with_name(self.path.name + '.tmp')
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=4)
            os.replace(tmp, self.path)
        except OSError as e:
            raise StorageError(f"cannot write {self.path}: {e}") from e


# -------------------- task serialization --------------------
def dump_tasks(tasks: Iterable[Task]) -> str:
    return json.dumps([t.to_dict() for t in tasks], ensure_ascii=False)


def parse_tasks(blob: str) -> List[Task]:
    """Decode a stored blob, skipping malformed entries and duplicate ids.

    Raises ValueError if the blob is not a JSON array.
    """
    raw_list: Any = json.loads(blob)
    if not isinstance(raw_list, list):
        raise ValueError("stored tasks are not a JSON array")
    tasks: List[Task] = []
    seen: Set[str] = set()
    for raw in raw_list:
        if not isinstance(raw, dict):
            logger.warning("Skipping non-object task entry: %r", raw)
            continue
        try:
            task = Task.from_dict(raw)
        except KeyError as e:
            logger.warning("Skipping task entry without %s: %r", e, raw)
            continue
        except ValueError as e:
            logger.warning("Skipping malformed task entry (%s): %r", e, raw)
            continue
        if task.id in seen:
            logger.warning("Dropping duplicate task id %s", task.id)
            continue
        seen.add(task.id)
        tasks.append(task)
    return tasks


async def load_tasks(store: Any) -> List[Task]:
    """Read the task list from ``store``.

    Absent key -> empty list. Read or decode failures are logged and also
    yield an empty list.
    """
    try:
        blob = await store.get(TASKS_STORAGE_KEY)
        if blob is None:
            return []
        tasks = parse_tasks(blob)
    except Exception:
        logger.exception("Failed to load tasks")
        return []
    logger.debug("Loaded %d tasks", len(tasks))
    return tasks


async def save_tasks(store: Any, tasks: Iterable[Task]) -> bool:
    """Write the full task list; returns False (after logging) on failure."""
    snapshot = list(tasks)
    try:
        await store.set(TASKS_STORAGE_KEY, dump_tasks(snapshot))
    except Exception:
        logger.exception("Failed to save %d tasks", len(snapshot))
        return False
    logger.debug("Saved %d tasks", len(snapshot))
    return True
