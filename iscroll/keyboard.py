"""Keyboard input handling using curtsies-style tokens."""

from typing import Optional
from dataclasses import dataclass
from enum import Enum


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    ALT = "alt"
    CTRL = "ctrl"
    SPECIAL = "special"


@dataclass
class KeyEvent:
    """Represents a parsed keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'q', 'down', 'page_down')
    raw: str  # The token as reported by the terminal
    is_alt: bool = False
    is_ctrl: bool = False


# Token names that differ between terminals, mapped to one spelling
_ALIASES = {
    'pageup': 'page_up',
    'pagedown': 'page_down',
    'page_up': 'page_up',
    'page_down': 'page_down',
    'esc': 'escape',
    'escape': 'escape',
    'return': 'enter',
}

SPECIAL_KEYS = {
    'up', 'down', 'left', 'right', 'home', 'end', 'enter',
    'page_up', 'page_down', 'escape', 'backspace', 'delete',
    'f1', 'f2', 'f3', 'f4',
}


class KeyboardHandler:
    """Turns terminal key tokens into KeyEvents."""

    def __init__(self, terminal_interface):
        self.terminal = terminal_interface

    def get_key_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        key = self.terminal.get_key(timeout)
        if not key:
            return None
        return self.parse_key(key)

    def _parse_token(self, token: str) -> KeyEvent:
        # '<Ctrl-n>', '<Esc+v>', '<PAGEDOWN>', '<Alt-DOWN>'
        name = token[1:-1].lower().replace('+', '-')
        parts = name.split('-')
        # A bare '<->' style token leaves an empty base; keep the dash itself
        base = parts[-1] or '-'
        mods = set(parts[:-1])
        if mods & {'meta', 'esc'}:
            mods.add('alt')
        base = _ALIASES.get(base, base)

        if base in ('space', 'spacebar', 'spc') and not mods:
            return KeyEvent(key_type=KeyType.REGULAR, value=' ', raw=token)
        if 'ctrl' in mods and len(base) == 1:
            return KeyEvent(key_type=KeyType.CTRL, value=base, raw=token, is_ctrl=True)
        if 'alt' in mods and (base in SPECIAL_KEYS or len(base) == 1):
            return KeyEvent(key_type=KeyType.ALT, value=base, raw=token, is_alt=True)
        return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=token)

    def parse_key(self, key) -> KeyEvent:
        """Parse a curtsies key token (or raw character) into a KeyEvent."""
        key_str = str(key)

        if len(key_str) > 2 and key_str.startswith('<') and key_str.endswith('>'):
            return self._parse_token(key_str)

        if key_str == '\x1b':
            return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw=key_str)

        if len(key_str) == 1:
            o = ord(key_str)
            if o in (10, 13):
                return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str)
            if 1 <= o <= 26:
                ch = chr(ord('a') + o - 1)
                return KeyEvent(key_type=KeyType.CTRL, value=ch, raw=key_str, is_ctrl=True)

        return KeyEvent(key_type=KeyType.REGULAR, value=key_str, raw=key_str)
