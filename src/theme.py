"""Color & style helpers.

Decisions:
- Truecolor preferred; falls back to 256-color cube if unsupported.
- Disables automatically when not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- Palette overrides come from TODO_* variables (environment or .env).
"""
from __future__ import annotations
import os, sys

from config import env

_FORCE = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
_NO_COLOR = os.environ.get("NO_COLOR") is not None
_ENABLE = (_FORCE or sys.stdout.isatty()) and not _NO_COLOR
_COLORTERM = os.environ.get("COLORTERM", "").lower()
_USE_TRUECOLOR = _ENABLE and any(tok in _COLORTERM for tok in ("truecolor", "24bit"))

def _code(part: str) -> str:
    """Generate ANSI escape code for a given style part."""
    return f"\033[{part}m" if _ENABLE else ''

def _valid_hex(value: str) -> bool:
    h = value.lstrip('#')
    return len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h)

def _hex_to_rgb(hex_code: str) -> tuple[int,int,int]:
    """Convert a hex color code to an RGB tuple."""
    h = hex_code.lstrip('#')
    return int(h[0:2],16), int(h[2:4],16), int(h[4:6],16)

def _fg_truecolor(r: int, g: int, b: int) -> str:
    return f"\033[38;2;{r};{g};{b}m"

def _fg_256(r: int, g: int, b: int) -> str:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    r6, g6, b6 = to_6(r), to_6(g), to_6(b)
    idx = 16 + 36 * r6 + 6 * g6 + b6
    return f"\033[38;5;{idx}m"

def _from_hex(hex_code: str) -> str:
    """Convert a hex color code to an ANSI escape sequence."""
    if not _ENABLE:
        return ''
    r, g, b = _hex_to_rgb(hex_code)
    if _USE_TRUECOLOR:
        return _fg_truecolor(r, g, b)
    return _fg_256(r, g, b)

def _palette(name: str, default: str) -> str:
    value = env(name) or default
    if not _valid_hex(value):
        return default
    return '#' + value.lstrip('#')

RESET = _code('0')
BOLD = _code('1')
DIM = _code('2')
STRIKE = _code('9')

# Default palette (taken from the mobile app's stylesheet)
HEX_TITLE_DEFAULT = '#6B7280'
HEX_ACCENT_DEFAULT = '#FFA5A5'
HEX_MUTED_DEFAULT = '#AAAAAA'
HEX_TEXT_DEFAULT = '#333333'

HEX_TITLE = _palette('TODO_TITLE', HEX_TITLE_DEFAULT)
HEX_ACCENT = _palette('TODO_ACCENT', HEX_ACCENT_DEFAULT)
HEX_MUTED = _palette('TODO_MUTED', HEX_MUTED_DEFAULT)
HEX_TEXT = _palette('TODO_TEXT', HEX_TEXT_DEFAULT)

TITLE_COLOR = _from_hex(HEX_TITLE) + BOLD
ACCENT_COLOR = _from_hex(HEX_ACCENT)
TEXT_COLOR = _from_hex(HEX_TEXT)
MUTED_COLOR = _from_hex(HEX_MUTED)
COMPLETED_COLOR = MUTED_COLOR + STRIKE
INDEX_COLOR = ACCENT_COLOR + BOLD
EMPTY_COLOR = DIM + MUTED_COLOR

def color(text: str, *styles: str) -> str:
    """Apply ANSI styles to a given text."""
    if not _ENABLE:
        return text
    return ''.join(styles) + text + RESET

__all__ = [
    'color','RESET','BOLD','DIM','STRIKE','TITLE_COLOR','ACCENT_COLOR','TEXT_COLOR',
    'MUTED_COLOR','COMPLETED_COLOR','INDEX_COLOR','EMPTY_COLOR',
    'HEX_TITLE','HEX_ACCENT','HEX_MUTED','HEX_TEXT'
]
