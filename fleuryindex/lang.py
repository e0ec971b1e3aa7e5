"""Registry of languages and helpers for positional context queries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Protocol

from fleuryindex.tokens import Token


class _NoteLookup(Protocol):
    def lookup_note(self, string: str, parent: Any) -> Any: ...


@dataclass
class PosContextData:
    """What is known about the code around a position.

    ``relevant_note`` is the index note for the function being called or
    the type being accessed, ``query_token`` the token being completed (for
    member access) and ``argument_index`` the argument the position is in.
    """

    relevant_note: Any = None
    query_token: Optional[Token] = None
    argument_index: int = 0


@dataclass
class Language:
    """A language's lexer, indexer and context provider."""

    name: str
    index_file: Callable[[Any], None]
    lexer: Callable[[str], Iterable[Token]]
    pos_context: Optional[Callable[..., list[PosContextData]]] = None

    def lex(self, text: str) -> list[Token]:
        """Lex the whole of ``text`` in one go."""
        return list(self.lexer(text))


def file_extension(file_name: str) -> str:
    """Text after the last dot; the whole name when there is no dot."""
    _, dot, extension = file_name.rpartition(".")
    return extension if dot else file_name


class LanguageRegistry:
    """Languages keyed by name (which is also their file extension)."""

    def __init__(self):
        self._languages: dict[str, Language] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._languages

    def __len__(self) -> int:
        return len(self._languages)

    def register(
        self,
        name: str,
        index_file: Callable[[Any], None],
        lex: Callable[[str], Iterable[Token]],
        pos_context: Optional[Callable[..., list[PosContextData]]] = None,
    ) -> Language:
        """Register a language; the first registration of a name wins."""
        existing = self._languages.get(name)
        if existing is not None:
            return existing
        language = Language(name, index_file, lex, pos_context)
        self._languages[name] = language
        return language

    def from_string(self, name: str) -> Optional[Language]:
        return self._languages.get(name)

    def from_file_name(self, file_name: str) -> Optional[Language]:
        return self.from_string(file_extension(file_name))


def push_call_context(
    index: _NoteLookup,
    results: list[PosContextData],
    string: str,
    arg_index: int,
) -> PosContextData:
    """Record that the position is argument ``arg_index`` of a call to ``string``."""
    data = PosContextData(index.lookup_note(string, None), None, arg_index)
    results.append(data)
    return data


def push_dot_context(
    index: _NoteLookup,
    results: list[PosContextData],
    string: str,
    query: Optional[Token],
) -> PosContextData:
    """Record that the position accesses a member of the type ``string``."""
    data = PosContextData(index.lookup_note(string, None), query, 0)
    results.append(data)
    return data