"""Rendering of the single to-do screen: header, list rows and wrapping.

render() returns plain lists of (possibly colored) lines so callers and
tests can inspect output without a terminal; display() prints them.
"""
from __future__ import annotations
import re, shutil
from typing import List, Sequence

from models import Task
from theme import (color, TITLE_COLOR, ACCENT_COLOR, TEXT_COLOR, MUTED_COLOR,
                   COMPLETED_COLOR, INDEX_COLOR, EMPTY_COLOR)

TITLE = "To Do List"
ADD_HINT = "Add a task +"
HIDE_HINT = "Hide input -"
MIN_WIDTH = 30
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")
META_SEP = " · "


def visible_len(s: str) -> int:
    return len(ANSI_RE.sub('', s))


def wrap_words(text: str, limit: int) -> List[str]:
    """Greedy word wrap; words longer than ``limit`` get a line of their own."""
    lines: List[str] = []
    current = ''
    limit = max(1, limit)
    for w in text.split():
        candidate = w if not current else current + ' ' + w
        if len(candidate) <= limit:
            current = candidate
        else:
            if current:
                lines.append(current)
            current = w
    if current:
        lines.append(current)
    return lines


def render_header(width: int, show_input: bool) -> List[str]:
    hint = HIDE_HINT if show_input else ADD_HINT
    gap = max(1, width - len(TITLE) - len(hint))
    return [color(TITLE, TITLE_COLOR) + ' ' * gap + color(hint, ACCENT_COLOR),
            color('-' * width, MUTED_COLOR)]


def render_task(task: Task, number: int, width: int, number_width: int = 1) -> List[str]:
    prefix_visible = f"{number:>{number_width}}. {'(x)' if task.completed else '( )'} "
    prefix_colored = (color(f"{number:>{number_width}}.", INDEX_COLOR) + ' '
                      + color('(x)' if task.completed else '( )', ACCENT_COLOR if task.completed else MUTED_COLOR)
                      + ' ')
    indent = ' ' * len(prefix_visible)
    limit = max(1, width - len(prefix_visible))
    text_style = COMPLETED_COLOR if task.completed else TEXT_COLOR

    lines_raw = wrap_words(task.text, limit) or ['<empty>']
    meta = META_SEP.join(p for p in (task.day, task.date) if p)

    colored: List[str] = []
    for idx, raw_line in enumerate(lines_raw):
        lead = prefix_colored if idx == 0 else indent
        colored.append(lead + color(raw_line, text_style))
    if meta:
        last_visible = len(lines_raw[-1])
        # right-align metadata on the last text line when it fits
        if last_visible + 2 + len(meta) <= limit:
            pad = limit - last_visible - len(meta)
            colored[-1] += ' ' * pad + color(meta, MUTED_COLOR)
        else:
            colored.append(indent + color(meta, MUTED_COLOR))
    return colored


def render(tasks: Sequence[Task], width: int, show_input: bool = False) -> List[str]:
    width = max(MIN_WIDTH, width)
    lines = render_header(width, show_input)
    if not tasks:
        lines.append(color('(no tasks)', EMPTY_COLOR))
        return lines
    number_width = len(str(len(tasks)))
    for number, task in enumerate(tasks, start=1):
        lines.extend(render_task(task, number, width, number_width))
    return lines


def display(tasks: Sequence[Task], show_input: bool = False) -> None:
    term_width = shutil.get_terminal_size((80, 24)).columns
    for line in render(tasks, term_width, show_input):
        print(line)
