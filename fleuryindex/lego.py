"""Legos: numbered clipboard slots filled from the buffer and placed back."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

MAX_LEGOS = 12
_FUNCTION_KEY_COUNT = 24
_KEYS_PER_CYCLE = 4


class LegoKind(Enum):
    NULL = 0
    STRING = 1
    MACRO = 2
    FILE = 3


@dataclass
class Placement:
    """Result of placing a lego: the new text, the mark and the cursor."""

    text: str
    mark: int
    cursor: int


@dataclass
class Lego:
    """A single slot holding a piece of text."""

    kind: LegoKind = LegoKind.NULL
    string: str = ""

    def store(self, kind: LegoKind, string: str) -> None:
        """Replace the slot's contents."""
        self.kind = kind
        self.string = string

    def place(self, text: str, pos: int) -> Optional[Placement]:
        """Insert the lego into ``text`` at ``pos``.

        The mark lands before the inserted string and the cursor after it.
        Only string legos can be placed; others leave the text alone and
        return ``None``.
        """
        if not 0 <= pos <= len(text):
            raise ValueError(f"position {pos} is outside the text (0..{len(text)})")
        if self.kind is not LegoKind.STRING:
            return None
        new_text = text[:pos] + self.string + text[pos:]
        return Placement(new_text, pos, pos + len(self.string))


class LegoBoard:
    """The fixed set of lego slots."""

    def __init__(self):
        self.legos = [Lego() for _ in range(MAX_LEGOS)]

    def from_index(self, index: int) -> Optional[Lego]:
        if 0 <= index < MAX_LEGOS:
            return self.legos[index]
        return None

    def from_function_key(self, key_number: int) -> Optional[Lego]:
        """The lego bound to function key F``key_number`` (F1 to F24)."""
        if 1 <= key_number <= _FUNCTION_KEY_COUNT:
            return self.from_index((key_number - 1) % _KEYS_PER_CYCLE)
        return None