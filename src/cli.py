"""Interactive command loop for the to-do list.

Tasks are addressed by their 1-based position on screen. Input is read in
a worker thread so pending saves keep running while the prompt waits.
"""
from __future__ import annotations
import asyncio
import logging
import threading
from typing import Awaitable, Callable, List, Optional

import view
from models import Task
from todo_list import TodoList, moved

logger = logging.getLogger(__name__)

ReadLine = Callable[[str], Awaitable[str]]


# --- terminal control helpers ---
# ESC[3J (scrollback), ESC[H (home), ESC[2J (screen), ESC[H (home)
def _clear_screen() -> None:
    print("\033[3J\033[H\033[2J\033[H", end="", flush=True)


def _enter_alt_screen() -> None:
    print("\033[?1049h", end="", flush=True)


def _leave_alt_screen() -> None:
    print("\033[?1049l", end="", flush=True)


async def _read_line(prompt: str) -> str:
    """input() on a daemon thread; an abandoned prompt never blocks exit."""
    loop = asyncio.get_running_loop()
    fut: asyncio.Future = loop.create_future()

    def deliver(setter: Callable, value: object) -> None:
        if not fut.done():
            setter(value)

    def worker() -> None:
        try:
            line = input(prompt)
        except Exception as e:  # EOFError, OSError on a closed stdin
            outcome = (fut.set_exception, e)
        else:
            outcome = (fut.set_result, line)
        try:
            loop.call_soon_threadsafe(deliver, *outcome)
        except RuntimeError:
            logger.debug("Input arrived after the event loop closed")

    threading.Thread(target=worker, name="todo-input", daemon=True).start()
    return await fut


TOGGLE_INPUT = {'+', 'new'}
HELP_TEXT = """Commands:
  +  (or new)         Show/hide the add-task input
  add <text...>       Add a task (e.g., add buy milk)
  x <n>  (or done)    Toggle task n complete/not complete
  edit <n> [text...]  Edit task n (prompts when text is omitted; empty keeps it)
  rm <n>  (or del)    Delete task n
  mv <n> <pos>        Move task n to position pos
  help                Show this help (press Enter to return)
  exit                Save and exit

While the add input is shown, any line you type becomes a new task."""


class CLI:
    def __init__(self, todos: TodoList, alt_screen: bool = True,
                 read_line: ReadLine = _read_line):
        self.todos: TodoList = todos
        self.alt_screen: bool = alt_screen
        self.show_input: bool = False
        self._read_line = read_line

    async def run(self) -> None:
        """Main loop; the screen is cleared and redrawn each cycle.

        Outstanding saves are flushed before returning, whether the user
        typed exit or interrupted the loop.
        """
        exit_message: Optional[str] = None
        message: Optional[str] = None
        if self.alt_screen:
            _enter_alt_screen()
        try:
            while True:
                _clear_screen()
                view.display(self.todos.tasks, self.show_input)
                if message:
                    print(f"\n{message}")
                prompt = "\nNew task: " if self.show_input else "\n: "
                line = (await self._read_line(prompt)).strip()
                if not line:
                    message = None
                    continue
                lower = line.lower()
                if lower == 'help':
                    _clear_screen()
                    print(HELP_TEXT)
                    await self._read_line("\nPress Enter to return to the list...")
                    message = None
                    continue
                if lower == 'exit':
                    exit_message = "Goodbye."
                    break
                message = await self.handle_line(line)
        except (KeyboardInterrupt, EOFError):
            exit_message = "Interrupted. Goodbye."
        finally:
            await self.todos.flush()
            if self.alt_screen:
                _leave_alt_screen()
            if exit_message:
                print(exit_message)
        logger.info("Exited with %s", self.todos)

    async def handle_line(self, line: str) -> Optional[str]:
        """Apply one line of input; returns a message to show, if any."""
        if self.show_input and line.strip().lower() not in TOGGLE_INPUT:
            self.todos.add(line)
            self.show_input = False
            return None
        return await self._handle_command(line)

    # -------------------- command dispatch --------------------
    async def _handle_command(self, line: str) -> Optional[str]:
        tokens = line.split()
        if not tokens:
            return None
        cmd = tokens[0].lower()
        if cmd in TOGGLE_INPUT and len(tokens) == 1:
            self.show_input = not self.show_input
            return None
        if cmd == 'add':
            return self._cmd_add(line)
        if cmd in ('x', 'done'):
            return self._cmd_toggle(tokens)
        if cmd == 'edit':
            return await self._cmd_edit(line)
        if cmd in ('rm', 'del'):
            return self._cmd_rm(tokens)
        if cmd == 'mv':
            return self._cmd_mv(tokens)
        return "Unknown command. Type 'help' for instructions."

    def _resolve(self, token: str) -> Optional[Task]:
        raw = token.rstrip('.')
        if not raw.isdigit():
            return None
        idx = int(raw) - 1
        tasks = self.todos.tasks
        if idx < 0 or idx >= len(tasks):
            return None
        return tasks[idx]

    def _missing(self, token: str) -> str:
        raw = token.rstrip('.')
        if not raw.isdigit():
            return "Invalid number."
        return f"No task #{raw}."

    # ---- individual command helpers ----
    def _cmd_add(self, line: str) -> Optional[str]:
        text = line.strip()[3:].strip()
        if not text:
            self.show_input = True
            return None
        self.todos.add(text)
        return None

    def _cmd_toggle(self, tokens: List[str]) -> Optional[str]:
        if len(tokens) != 2:
            return "Usage: x <n>"
        task = self._resolve(tokens[1])
        if task is None:
            return self._missing(tokens[1])
        self.todos.toggle_complete(task.id)
        return None

    async def _cmd_edit(self, line: str) -> Optional[str]:
        tokens = line.strip().split(None, 2)
        if len(tokens) < 2:
            return "Usage: edit <n> [text]"
        task = self._resolve(tokens[1])
        if task is None:
            return self._missing(tokens[1])
        if len(tokens) > 2:
            new_text = tokens[2].strip()
        else:
            new_text = (await self._read_line(f"Edit [{task.text}]: ")).strip()
            if not new_text:
                return "Edit cancelled."
        self.todos.edit(task.id, new_text)
        return None

    def _cmd_rm(self, tokens: List[str]) -> Optional[str]:
        if len(tokens) != 2:
            return "Usage: rm <n>"
        task = self._resolve(tokens[1])
        if task is None:
            return self._missing(tokens[1])
        self.todos.delete(task.id)
        return f'Task "{task.text}" removed.'

    def _cmd_mv(self, tokens: List[str]) -> Optional[str]:
        if len(tokens) != 3:
            return "Usage: mv <n> <pos>"
        task = self._resolve(tokens[1])
        if task is None:
            return self._missing(tokens[1])
        if not tokens[2].isdigit():
            return "Invalid position."
        tasks = self.todos.tasks
        self.todos.reorder(moved(tasks, tasks.index(task), int(tokens[2]) - 1))
        return None
