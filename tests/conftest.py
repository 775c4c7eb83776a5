# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable

import pytest

from storage import JsonFileStore
from todo_list import TodoList

from .fakes import MemoryStore

FIXED_NOW = datetime(2026, 10, 17, 9, 30, 0)


@pytest.fixture()
def clock() -> Callable[[], datetime]:
    """Frozen clock: every add in a test sees the same instant."""
    return lambda: FIXED_NOW


@pytest.fixture()
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def file_store(tmp_path: Path) -> JsonFileStore:
    return JsonFileStore(tmp_path / "store.json")


@pytest.fixture()
def todos(clock) -> TodoList:
    """Unpersisted list: mutations only touch memory."""
    return TodoList(clock=clock)
