# tests/test_storage.py

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import pytest

from models import Task
from storage import (TASKS_STORAGE_KEY, JsonFileStore, StorageError, dump_tasks,
                     load_tasks, parse_tasks, save_tasks)

from .fakes import FailingStore, MemoryStore


async def test_missing_file_reads_as_empty(file_store: JsonFileStore) -> None:
    assert await file_store.get(TASKS_STORAGE_KEY) is None


async def test_set_then_get(file_store: JsonFileStore) -> None:
    await file_store.set("greeting", "hello")
    assert await file_store.get("greeting") == "hello"

    on_disk = json.loads(file_store.path.read_text(encoding="utf-8"))
    assert on_disk == {"greeting": "hello"}


async def test_set_creates_parent_directories(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "nested" / "dir" / "store.json")
    await store.set("k", "v")
    assert store.path.exists()


async def test_remove_drops_key(file_store: JsonFileStore) -> None:
    await file_store.set("a", "1")
    await file_store.set("b", "2")
    await file_store.remove("a")
    assert await file_store.get("a") is None
    assert await file_store.get("b") == "2"


async def test_concurrent_sets_land_in_call_order(file_store: JsonFileStore) -> None:
    await asyncio.gather(*(file_store.set("k", str(i)) for i in range(10)))
    assert await file_store.get("k") == "9"


async def test_corrupt_file_raises_storage_error(file_store: JsonFileStore) -> None:
    file_store.path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageError):
        await file_store.get(TASKS_STORAGE_KEY)


async def test_non_object_file_raises_storage_error(file_store: JsonFileStore) -> None:
    file_store.path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(StorageError):
        await file_store.get(TASKS_STORAGE_KEY)


# -------------------- task blob --------------------
def test_parse_tasks_skips_malformed_and_duplicate_entries(caplog) -> None:
    blob = json.dumps([
        {"id": "1", "text": "ok"},
        {"text": "no id"},
        "not an object",
        {"id": "1", "text": "duplicate"},
        {"id": "2", "text": "also ok", "completed": True},
    ])
    with caplog.at_level(logging.WARNING):
        tasks = parse_tasks(blob)
    assert [(t.id, t.text) for t in tasks] == [("1", "ok"), ("2", "also ok")]
    assert "duplicate task id 1" in caplog.text


def test_parse_tasks_rejects_non_array() -> None:
    with pytest.raises(ValueError):
        parse_tasks('{"id": "1"}')


async def test_load_absent_key_is_empty() -> None:
    assert await load_tasks(MemoryStore()) == []


async def test_load_undecodable_blob_is_empty_and_logged(caplog) -> None:
    store = MemoryStore({TASKS_STORAGE_KEY: "[{broken"})
    with caplog.at_level(logging.ERROR):
        assert await load_tasks(store) == []
    assert "Failed to load tasks" in caplog.text


async def test_load_from_corrupt_file_is_empty(file_store: JsonFileStore) -> None:
    file_store.path.write_text("garbage", encoding="utf-8")
    assert await load_tasks(file_store) == []


async def test_load_read_failure_is_empty() -> None:
    assert await load_tasks(FailingStore()) == []


async def test_save_failure_returns_false(caplog) -> None:
    with caplog.at_level(logging.ERROR):
        ok = await save_tasks(FailingStore(), [Task(id="1", text="a")])
    assert ok is False
    assert "Failed to save 1 tasks" in caplog.text


async def test_round_trip_through_file(file_store: JsonFileStore) -> None:
    tasks = [
        Task(id="3", text="ünïcode ✓", date="17/10/2026"),
        Task(id="2", text="done", completed=True, date="16/10/2026"),
        Task(id="1", text="", date="15/10/2026", day="Yesterday"),
    ]
    assert await save_tasks(file_store, tasks) is True
    assert await load_tasks(file_store) == tasks


def test_dump_is_a_json_array_of_records() -> None:
    blob = dump_tasks([Task(id="1", text="a")])
    assert json.loads(blob) == [
        {"id": "1", "text": "a", "completed": False, "date": "", "day": "Today", "key": "1"}
    ]


async def test_set_recovers_from_corrupt_file(file_store: JsonFileStore, caplog) -> None:
    file_store.path.write_text("{truncated", encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        await file_store.set("k", "v")

    assert await file_store.get("k") == "v"
    backup = file_store.path.with_name("store.json.corrupt")
    assert backup.read_text(encoding="utf-8") == "{truncated"
    assert "is corrupt" in caplog.text


async def test_remove_recovers_from_non_object_file(file_store: JsonFileStore) -> None:
    file_store.path.write_text("[1, 2]", encoding="utf-8")
    await file_store.remove("k")
    await file_store.set("k", "v")
    assert await file_store.get("k") == "v"


async def test_session_after_corrupt_store_becomes_durable(file_store: JsonFileStore) -> None:
    from todo_list import TodoList

    file_store.path.write_text("{truncated", encoding="utf-8")
    todos = await TodoList.load(file_store)
    assert todos.tasks == ()

    todos.add("Buy milk")
    await todos.flush()

    assert [t.text for t in await load_tasks(file_store)] == ["Buy milk"]


def test_parse_tasks_skips_entries_with_non_string_text() -> None:
    blob = json.dumps([{"id": "1", "text": None}, {"id": "2", "text": "kept"}])
    assert [t.id for t in parse_tasks(blob)] == ["2"]
