"""Lexer and indexer for Metadesk files."""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Callable, Optional, Sequence

from fleuryindex.index import NoteKind, ParseContext
from fleuryindex.lang import PosContextData
from fleuryindex.tokens import Token, TokenBaseKind

_SYMBOLS = frozenset("~!@#$%^&*()-=+[]{}:;,<.>/?|\\")
_WHITESPACE = frozenset(" \t\n\r\f\v")


class MDTokenSubKind(IntEnum):
    """Sub-kinds the Metadesk lexer puts on its tokens."""

    NULL = 0
    TAG = 1


def char_is_symbol(c: str) -> bool:
    """Whether ``c`` is one of the characters Metadesk treats as a symbol."""
    return c in _SYMBOLS


def _is_alpha(c: str) -> bool:
    return c.isascii() and (c.isalpha() or c == "_")


def _is_word(c: str) -> bool:
    return c.isascii() and (c.isalnum() or c == "_")


def _is_number_part(c: str) -> bool:
    return _is_word(c) or c == "."


def _is_whitespace(c: str) -> bool:
    return c in _WHITESPACE


class MetadeskLexer:
    """A resumable lexer over one text.

    Each call to :meth:`lex` continues where the previous one stopped.
    Once the end-of-file token has been produced ``finished`` is true and
    further calls return nothing.
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.finished = False

    def lex(self, max_tokens: Optional[int] = None) -> list[Token]:
        """Lex up to ``max_tokens`` tokens, or to the end when it is ``None``.

        The end-of-file token is added only when the end is reached within
        this call's budget, or on the next call if the budget ran out
        exactly at the end.
        """
        tokens: list[Token] = []
        if self.finished:
            return tokens
        length = len(self.text)
        while self.pos < length:
            token = self._scan(self.pos)
            tokens.append(token)
            self.pos = token.end()
            if max_tokens is not None and len(tokens) >= max_tokens:
                return tokens
        tokens.append(Token(length, 1, TokenBaseKind.EOF))
        self.finished = True
        return tokens

    def _span_while(self, start: int, predicate: Callable[[str], bool]) -> int:
        text = self.text
        end = start
        while end < len(text) and predicate(text[end]):
            end += 1
        return end

    def _until(self, start: int, needle: str, include: bool) -> int:
        found = self.text.find(needle, start)
        if found < 0:
            return len(self.text)
        return found + len(needle) if include else found

    def _scan(self, i: int) -> Token:
        text = self.text
        c = text[i]
        following = text[i + 1] if i + 1 < len(text) else ""

        if c == "/" and following == "/":
            end = self._until(i + 2, "\n", include=False)
            return Token(i, end - i, TokenBaseKind.COMMENT)
        if c == "/" and following == "*":
            end = self._until(i + 2, "*/", include=True)
            return Token(i, end - i, TokenBaseKind.COMMENT)
        if _is_alpha(c):
            end = self._span_while(i + 1, _is_word)
            return Token(i, end - i, TokenBaseKind.IDENTIFIER)
        if _is_whitespace(c):
            end = self._span_while(i + 1, _is_whitespace)
            return Token(i, end - i, TokenBaseKind.WHITESPACE)
        if "0" <= c <= "9":
            end = self._span_while(i + 1, _is_number_part)
            return Token(i, end - i, TokenBaseKind.LITERAL_FLOAT)
        if c in "\"'":
            end = self._until(i + 1, c, include=True)
            return Token(i, end - i, TokenBaseKind.LITERAL_STRING)
        if c == "`":
            return Token(i, 1, TokenBaseKind.LITERAL_STRING)
        if c == "@":
            end = self._span_while(i + 1, _is_word)
            return Token(i, end - i, TokenBaseKind.IDENTIFIER, MDTokenSubKind.TAG)
        if c == "{":
            return Token(i, 1, TokenBaseKind.SCOPE_OPEN)
        if c == "}":
            return Token(i, 1, TokenBaseKind.SCOPE_CLOSE)
        if c in "([":
            return Token(i, 1, TokenBaseKind.PARENTHETICAL_OPEN)
        if c in ")]":
            return Token(i, 1, TokenBaseKind.PARENTHETICAL_CLOSE)
        if c in ",;" or (c == "-" and following == ">"):
            return Token(i, 1, TokenBaseKind.STATEMENT_CLOSE)
        if char_is_symbol(c):
            return Token(i, 1, TokenBaseKind.OPERATOR)
        return Token(i, 1, TokenBaseKind.LEX_ERROR)


def lex_metadesk(text: str) -> list[Token]:
    """Lex the whole of ``text``, ending with an end-of-file token."""
    return MetadeskLexer(text).lex()


def index_metadesk(ctx: ParseContext) -> None:
    """Index ``name:`` definitions as constants and tags found in comments."""
    while not ctx.done:
        name = ctx.require_token_kind(TokenBaseKind.IDENTIFIER)
        if name is not None:
            if ctx.require_token(":"):
                ctx.make_note(*name.range(), NoteKind.CONSTANT)
            continue
        comment = ctx.require_token_kind(TokenBaseKind.COMMENT)
        if comment is not None:
            ctx.parse_comment(comment)
        else:
            ctx.inc(True)


def metadesk_pos_context(
    index: Any, text: str, tokens: Sequence[Token], pos: int
) -> list[PosContextData]:
    """Metadesk offers no positional context."""
    return []