"""Settings read from environment variables (+ optional project .env file).

Priority: real environment variable > .env entry > default.
All variables use the TODO_ prefix.
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

PROJECT_ROOT = Path(__file__).resolve().parent.parent
ENV_FILE = PROJECT_ROOT / '.env'
DATA_DIR = PROJECT_ROOT / 'data'


def read_env_file(path: Path = ENV_FILE) -> Dict[str, str]:
    """Parse KEY=VALUE lines; blank lines and # comments are ignored."""
    values: Dict[str, str] = {}
    if not path.exists():
        return values
    try:
        text = path.read_text(encoding='utf-8')
    except OSError:
        return values
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        values[k.strip()] = v.strip().strip('"').strip("'")
    return values


_ENV_OVERRIDES = read_env_file()


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    raw = os.environ.get(name)
    if raw is not None and raw.strip() != '':
        return raw
    return _ENV_OVERRIDES.get(name, default)


def env_bool(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off", ""}


def env_path(name: str, default: Path) -> Path:
    raw = env(name)
    if raw is None or raw.strip() == '':
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    data_file: Path
    log_dir: Path
    log_level: int
    alt_screen: bool


def get_settings() -> Settings:
    level_name = (env('TODO_LOG_LEVEL', 'WARNING') or 'WARNING').upper()
    level = getattr(logging, level_name, logging.WARNING)
    return Settings(
        data_file=env_path('TODO_DATA_FILE', DATA_DIR / 'store.json'),
        log_dir=env_path('TODO_LOG_DIR', DATA_DIR / 'logs'),
        log_level=level if isinstance(level, int) else logging.WARNING,
        alt_screen=env_bool('TODO_ALT_SCREEN', True),
    )
