"""Data models for the terminal to-do list.

Only exposes the Task record. Records are frozen; the list container
produces replaced copies instead of mutating in place, so a snapshot
handed to the store can never change underneath a pending save.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping

logger = logging.getLogger(__name__)

DEFAULT_DAY = "Today"


@dataclass(frozen=True)
class Task:
    """A single to-do item.

    Fields:
        id: Creation timestamp in milliseconds, as a string. Unique per list.
        text: User-visible content.
        completed: Done flag toggled by the checkbox.
        date: Creation date, DD/MM/YYYY.
        day: Display label, "Today" when created.
        key: Rendering identity; equal to id.
    """
    id: str
    text: str
    completed: bool = False
    date: str = ""
    day: str = DEFAULT_DAY
    key: str = ""

    def __post_init__(self) -> None:
        if not self.key:
            object.__setattr__(self, "key", self.id)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Task":
        """Build a Task from a stored mapping.

        Raises KeyError when id or text is missing and ValueError when either
        has the wrong type. Other fields fall back to their defaults so older
        blobs still load.
        """
        raw_id, text = raw["id"], raw["text"]
        if isinstance(raw_id, bool) or not isinstance(raw_id, (str, int)):
            raise ValueError(f"task id must be a string, got {raw_id!r}")
        if not isinstance(text, str):
            raise ValueError(f"task text must be a string, got {text!r}")
        completed = raw.get("completed", False)
        if not isinstance(completed, bool):
            logger.warning("Task %s has non-boolean completed=%r; using False", raw_id, completed)
            completed = False
        tid = str(raw_id)
        return cls(
            id=tid,
            text=text,
            completed=completed,
            date=str(raw.get("date") or ""),
            day=str(raw.get("day") or DEFAULT_DAY),
            key=str(raw.get("key") or tid),
        )

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id}, text={self.text!r}, completed={self.completed})"
