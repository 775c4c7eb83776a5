# tests/fakes.py

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from storage import StorageError


class MemoryStore:
    """
    In-memory key-value store with the same async contract as JsonFileStore.

    Records every set() so tests can assert on save counts and order.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})
        self.set_calls: List[Tuple[str, str]] = []

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.set_calls.append((key, value))
        self.data[key] = value

    async def remove(self, key: str) -> None:
        self.data.pop(key, None)


class FailingStore:
    """Store whose reads and writes always fail."""

    def __init__(self) -> None:
        self.attempts = 0

    async def get(self, key: str) -> Optional[str]:
        self.attempts += 1
        raise StorageError("disk on fire")

    async def set(self, key: str, value: str) -> None:
        self.attempts += 1
        raise StorageError("disk on fire")


class ScriptedInput:
    """Async read_line replacement fed from a list; EOFError once exhausted."""

    def __init__(self, lines: List[str]) -> None:
        self.lines = list(lines)
        self.prompts: List[str] = []

    async def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)
