"""Main entry point for the terminal to-do list."""
import asyncio
import logging

from cli import CLI
from config import Settings, get_settings
from logging_setup import setup_logging
from storage import JsonFileStore
from todo_list import TodoList

logger = logging.getLogger(__name__)


async def _run(settings: Settings) -> None:
    store = JsonFileStore(settings.data_file)
    todos = await TodoList.load(store)
    logger.info("Started with %s from %s", todos, store.path)
    await CLI(todos, alt_screen=settings.alt_screen).run()


def main() -> None:
    settings = get_settings()
    setup_logging(log_dir=settings.log_dir, console_level=settings.log_level)
    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        print("Interrupted. Goodbye.")


if __name__ == "__main__":
    main()
