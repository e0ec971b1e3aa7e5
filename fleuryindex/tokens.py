"""Tokens produced by the lexers and an iterator for walking over them."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Optional, Sequence


class TokenBaseKind(IntEnum):
    """Language-independent classification of a token."""

    EOF = 0
    WHITESPACE = 1
    LEX_ERROR = 2
    COMMENT = 3
    KEYWORD = 4
    PREPROCESSOR = 5
    IDENTIFIER = 6
    OPERATOR = 7
    LITERAL_INTEGER = 8
    LITERAL_FLOAT = 9
    LITERAL_STRING = 10
    SCOPE_OPEN = 11
    SCOPE_CLOSE = 12
    PARENTHETICAL_OPEN = 13
    PARENTHETICAL_CLOSE = 14
    STATEMENT_CLOSE = 15


class TokenBaseFlag(IntFlag):
    """Flags shared by every language's tokens."""

    NONE = 0
    PREPROCESSOR_BODY = 1 << 0


@dataclass(slots=True)
class Token:
    """A lexed token: a span of the source text with its kinds and flags."""

    pos: int
    size: int
    kind: TokenBaseKind
    sub_kind: int = 0
    flags: int = 0

    def range(self) -> tuple[int, int]:
        """The half-open span ``(start, end)`` covered by the token."""
        return self.pos, self.pos + self.size

    def end(self) -> int:
        """One past the last position covered by the token."""
        return self.pos + self.size


def _clamp_index(index: int, count: int) -> int:
    if count == 0:
        return 0
    return max(0, min(index, count - 1))


class TokenIterator:
    """A cursor over a token sequence that never leaves its bounds.

    Movement methods return ``True`` when the cursor moved and ``False``
    (leaving it in place) when there is nowhere to go.
    """

    def __init__(self, tokens: Sequence[Token], index: int = 0):
        self.tokens = tokens
        self.index = _clamp_index(index, len(tokens))

    def __repr__(self) -> str:
        return f"TokenIterator(index={self.index}, count={len(self.tokens)})"

    def read(self) -> Optional[Token]:
        """The token under the cursor, or ``None`` if there are no tokens."""
        if not self.tokens:
            return None
        return self.tokens[self.index]

    def inc_all(self) -> bool:
        if self.index + 1 < len(self.tokens):
            self.index += 1
            return True
        return False

    def inc_non_whitespace(self) -> bool:
        for i in range(self.index + 1, len(self.tokens)):
            if self.tokens[i].kind != TokenBaseKind.WHITESPACE:
                self.index = i
                return True
        return False

    def dec_all(self) -> bool:
        if self.index > 0 and self.tokens:
            self.index -= 1
            return True
        return False

    def dec_non_whitespace(self) -> bool:
        for i in range(self.index - 1, -1, -1):
            if self.tokens[i].kind != TokenBaseKind.WHITESPACE:
                self.index = i
                return True
        return False


def token_index_from_pos(tokens: Sequence[Token], pos: int) -> int:
    """Index of the token containing ``pos``, clamped to the sequence."""
    if not tokens:
        return 0
    after = bisect.bisect_right(tokens, pos, key=lambda token: token.pos)
    return _clamp_index(after - 1, len(tokens))


def iterator_at_pos(tokens: Sequence[Token], pos: int) -> TokenIterator:
    """An iterator placed on the token containing ``pos``."""
    return TokenIterator(tokens, token_index_from_pos(tokens, pos))