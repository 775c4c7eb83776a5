"""Task-list state: ordering, id management, mutation and persistence.

Every mutation replaces the current snapshot (a tuple of frozen Task
records) and schedules a full-list save. Saves are fire-and-forget: a
failed save is logged by storage.save_tasks and the change stays in
memory.
"""
from __future__ import annotations
import asyncio
import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Iterable, Optional, Set, Sequence, Tuple

from models import Task, DEFAULT_DAY
from storage import load_tasks, save_tasks

logger = logging.getLogger(__name__)

Snapshot = Tuple[Task, ...]
DATE_FORMAT = "%d/%m/%Y"  # en-GB


def moved(tasks: Sequence[Task], from_index: int, to_index: int) -> Snapshot:
    """Return the order a drag gesture produces: lift one item, drop it elsewhere.

    Indices are 0-based and clamped into range.
    """
    items = list(tasks)
    if not items:
        return ()
    src = min(max(from_index, 0), len(items) - 1)
    dst = min(max(to_index, 0), len(items) - 1)
    item = items.pop(src)
    items.insert(dst, item)
    return tuple(items)


class TodoList:
    def __init__(self, tasks: Iterable[Task] = (), store: Any = None,
                 clock: Callable[[], datetime] = datetime.now):
        self._tasks: Snapshot = tuple(tasks)
        self._store = store
        self._clock = clock
        self._pending: Set[asyncio.Task] = set()

    @classmethod
    async def load(cls, store: Any, **kwargs: Any) -> "TodoList":
        return cls(await load_tasks(store), store=store, **kwargs)

    # -------------------- queries --------------------
    @property
    def tasks(self) -> Snapshot:
        return self._tasks

    def find(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def __len__(self) -> int:
        return len(self._tasks)

    # -------------------- id management --------------------
    def _fresh_id(self, now: datetime) -> str:
        taken = {t.id for t in self._tasks}
        stamp = int(now.timestamp() * 1000)
        while str(stamp) in taken:
            stamp += 1
        return str(stamp)

    # -------------------- task operations --------------------
    def add(self, raw_text: str) -> Snapshot:
        text = raw_text.strip()
        if not text:
            return self._tasks
        now = self._clock()
        tid = self._fresh_id(now)
        task = Task(
            id=tid,
            text=text,
            completed=False,
            date=now.strftime(DATE_FORMAT),
            day=DEFAULT_DAY,
            key=tid,
        )
        return self._commit((task,) + self._tasks)

    def edit(self, task_id: str, new_text: str) -> Snapshot:
        return self._update(task_id, lambda t: replace(t, text=new_text))

    def toggle_complete(self, task_id: str) -> Snapshot:
        return self._update(task_id, lambda t: replace(t, completed=not t.completed))

    def delete(self, task_id: str) -> Snapshot:
        if self.find(task_id) is None:
            return self._tasks
        return self._commit(tuple(t for t in self._tasks if t.id != task_id))

    def reorder(self, new_order: Sequence[Task]) -> Snapshot:
        """Replace the list with a permutation of the same records.

        Raises ValueError if ``new_order`` is not a permutation of the
        current records (same ids, unchanged contents); the list is left
        untouched in that case.
        """
        if sorted(new_order, key=lambda t: t.id) != sorted(self._tasks, key=lambda t: t.id):
            raise ValueError("new order must be a permutation of the current tasks")
        return self._commit(tuple(new_order))

    def _update(self, task_id: str, change: Callable[[Task], Task]) -> Snapshot:
        if self.find(task_id) is None:
            return self._tasks
        return self._commit(tuple(change(t) if t.id == task_id else t for t in self._tasks))

    # -------------------- persistence --------------------
    def _commit(self, tasks: Snapshot) -> Snapshot:
        self._tasks = tasks
        if self._store is not None:
            self._schedule_save(tasks)
        return tasks

    def _schedule_save(self, tasks: Snapshot) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # no event loop (plain scripts, sync tests): save inline
            asyncio.run(save_tasks(self._store, tasks))
            return
        pending = loop.create_task(save_tasks(self._store, tasks))
        self._pending.add(pending)
        pending.add_done_callback(self._pending.discard)

    async def flush(self) -> None:
        """Wait for every save scheduled so far."""
        while self._pending:
            batch = list(self._pending)
            await asyncio.gather(*batch)
            self._pending.difference_update(batch)

    def __str__(self) -> str:
        done = sum(1 for t in self._tasks if t.completed)
        return f'{len(self._tasks)} tasks, {done} completed'
