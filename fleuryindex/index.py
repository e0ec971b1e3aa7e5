"""The code index: notes about definitions, keyed by name, built per file."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import Any, Callable, Hashable, Optional, Sequence

from fleuryindex.tokens import Token, TokenBaseFlag, TokenBaseKind, iterator_at_pos


class NoteKind(IntEnum):
    """What a note describes."""

    NULL = 0
    SCOPE = 1
    TYPE = 2
    CONSTANT = 3
    FUNCTION = 4
    DECL = 5
    MACRO = 6
    COMMENT_TAG = 7
    COMMENT_TODO = 8


class NoteFlag(IntFlag):
    """Extra facts about a note."""

    NONE = 0
    PROTOTYPE = 1 << 0
    PRODUCT_TYPE = 1 << 1
    SUM_TYPE = 1 << 2


@dataclass(eq=False)
class Note:
    """A named thing found in a file, with its place in the file's note tree."""

    string: str
    kind: NoteKind = NoteKind.NULL
    flags: NoteFlag = NoteFlag.NONE
    range: tuple[int, int] = (0, 0)
    file: Optional["IndexFile"] = field(default=None, repr=False)
    file_generation: int = 0
    parent: Optional["Note"] = field(default=None, repr=False)
    children: list["Note"] = field(default_factory=list, repr=False)
    _chain: Optional[list["Note"]] = field(default=None, repr=False)


@dataclass(eq=False)
class IndexFile:
    """The notes of one buffer; ``generation`` grows every time it is cleared."""

    buffer: Hashable
    notes: list[Note] = field(default_factory=list)
    generation: int = 0


class PatternMatch(tuple):
    """Values captured by a successful pattern; true even when it is empty."""

    def __bool__(self) -> bool:
        return True


def _remove_by_identity(items: list, item: Any) -> None:
    for position, candidate in enumerate(items):
        if candidate is item:
            del items[position]
            return


class CodeIndex:
    """Files and their notes, with notes of the same name chained together.

    Notes sharing a name form duplicate chains; a lookup sees the head of
    each chain, and a new note joins the chain whose head has no parent.
    """

    def __init__(self):
        self.lock = threading.RLock()
        self._files: dict[Hashable, IndexFile] = {}
        self._chains: dict[str, list[list[Note]]] = {}

    def lookup_file(self, buffer: Hashable) -> Optional[IndexFile]:
        with self.lock:
            return self._files.get(buffer)

    def lookup_or_make_file(self, buffer: Hashable) -> IndexFile:
        with self.lock:
            file = self._files.get(buffer)
            if file is None:
                file = IndexFile(buffer)
                self._files[buffer] = file
            return file

    def erase_file(self, buffer: Hashable) -> None:
        """Forget a buffer's file, dropping its notes from the index."""
        with self.lock:
            file = self._files.pop(buffer, None)
            if file is not None:
                self.clear_file(file)

    def clear_file(self, file: Optional[IndexFile]) -> None:
        """Remove all of a file's notes and start a new generation."""
        if file is None:
            return
        with self.lock:
            file.generation += 1
            for note in file.notes:
                self._free_tree(note)
            file.notes = []

    def lookup_note(self, string: str, parent: Optional[Note] = None) -> Optional[Note]:
        """The head of the chain named ``string`` whose parent is ``parent``."""
        with self.lock:
            for chain in self._chains.get(string, ()):
                if chain[0].parent is parent:
                    return chain[0]
            return None

    def parse_file(
        self,
        file: IndexFile,
        string: str,
        tokens: Sequence[Token],
        index_file: Optional[Callable[["ParseContext"], None]],
    ) -> None:
        """Run a language's indexer over ``tokens`` of ``string`` into ``file``."""
        with self.lock:
            if index_file is not None:
                index_file(ParseContext(self, file, string, tokens))

    def _insert(self, note: Note, parent: Optional[Note], file: IndexFile) -> None:
        with self.lock:
            head = self.lookup_note(note.string, None)
            if head is not None and head._chain is not None:
                head._chain.append(note)
                note._chain = head._chain
            else:
                chain = [note]
                note._chain = chain
                self._chains.setdefault(note.string, []).insert(0, chain)

            note.parent = parent
            if parent is not None:
                parent.children.append(note)
            else:
                file.notes.append(note)

    def _free_tree(self, note: Note) -> None:
        for child in note.children:
            self._free_tree(child)
        chain = note._chain
        if chain is None:
            return
        _remove_by_identity(chain, note)
        note._chain = None
        if not chain:
            slot = self._chains.get(note.string)
            if slot is not None:
                _remove_by_identity(slot, chain)
                if not slot:
                    del self._chains[note.string]


class ParseContext:
    """The state of an indexer walking one file's tokens."""

    def __init__(
        self,
        index: CodeIndex,
        file: Optional[IndexFile],
        string: str,
        tokens: Sequence[Token],
    ):
        self.index = index
        self.file = file
        self.string = string
        self.tokens = tokens
        self.it = iterator_at_pos(tokens, 0)
        self.done = False
        self.active_parent: Optional[Note] = None

    def inc(self, skip_whitespace: bool = True) -> bool:
        """Step to the next token; returns whether the end has been reached."""
        moved = self.it.inc_non_whitespace() if skip_whitespace else self.it.inc_all()
        self.done = not moved
        return self.done

    def _current_text(self) -> Optional[str]:
        token = self.it.read()
        if token is None:
            self.done = True
            return None
        return self.string_from_token(token)

    def require_token(self, string: str, skip_whitespace: bool = True) -> bool:
        """Consume the current token if its text is ``string``."""
        matched = self._current_text() == string
        if matched:
            self.inc(skip_whitespace)
        return matched

    def require_token_kind(
        self, kind: TokenBaseKind, skip_whitespace: bool = True
    ) -> Optional[Token]:
        """Consume and return the current token if it has base kind ``kind``."""
        token = self.it.read()
        if token is None:
            self.done = True
            return None
        if token.kind != kind:
            return None
        self.inc(skip_whitespace)
        return token

    def require_token_sub_kind(
        self, sub_kind: int, skip_whitespace: bool = True
    ) -> Optional[Token]:
        """Consume and return the current token if it has sub-kind ``sub_kind``."""
        token = self.it.read()
        if token is None:
            self.done = True
            return None
        if token.sub_kind != sub_kind:
            return None
        self.inc(skip_whitespace)
        return token

    def peek_token(self, string: str) -> bool:
        """Whether the current token's text is ``string``, without consuming it."""
        return self._current_text() == string

    def parse_comment(self, token: Token) -> None:
        """Make notes for an ``@`` tag or ``TODO`` markers inside a comment."""
        text = self.string_from_token(token)
        start, end = token.range()
        for i, char in enumerate(text):
            if char == "@":
                self.make_note(start + i, end, NoteKind.COMMENT_TAG)
                break
            if i + 4 < len(text) and text[i:i + 4] == "TODO":
                self.make_note(start + i, end, NoteKind.COMMENT_TODO)

    def skip_soft_tokens(self, preproc: bool) -> None:
        """Skip to the end of a preprocessor body, or to a statement boundary."""
        while not self.done:
            token = self.it.read()
            if token is None:
                self.done = True
                break
            if preproc:
                if (
                    not token.flags & TokenBaseFlag.PREPROCESSOR_BODY
                    or token.kind == TokenBaseKind.PREPROCESSOR
                ):
                    break
            elif token.kind in (
                TokenBaseKind.STATEMENT_CLOSE,
                TokenBaseKind.SCOPE_OPEN,
                TokenBaseKind.PARENTHETICAL_OPEN,
            ):
                break
            if not self.it.inc_non_whitespace():
                break

    def skip_op_tokens(self) -> None:
        """Skip operators and anything inside parentheses."""
        paren_nest = 0
        while not self.done:
            token = self.it.read()
            if token is None:
                self.done = True
                break
            if token.kind == TokenBaseKind.PARENTHETICAL_OPEN:
                paren_nest += 1
            elif token.kind == TokenBaseKind.PARENTHETICAL_CLOSE:
                paren_nest = max(0, paren_nest - 1)
            elif token.kind != TokenBaseKind.OPERATOR and paren_nest == 0:
                break
            self.inc(True)

    def string_from_range(self, start: int, end: int) -> str:
        return self.string[max(0, start):max(0, end)]

    def string_from_token(self, token: Token) -> str:
        return self.string_from_range(*token.range())

    def push_parent(self, parent: Optional[Note]) -> Optional[Note]:
        """Make ``parent`` the parent of new notes; returns the previous one."""
        previous = self.active_parent
        self.active_parent = parent
        return previous

    def pop_parent(self, last_parent: Optional[Note]) -> None:
        self.active_parent = last_parent

    def make_note(
        self,
        start: int,
        end: int,
        kind: NoteKind,
        flags: NoteFlag = NoteFlag.NONE,
    ) -> Note:
        """Record a note named by the text in ``start..end`` under the active parent."""
        note = Note(self.string_from_range(start, end), kind, NoteFlag(flags), (start, end))
        if self.file is not None:
            note.file = self.file
            note.file_generation = self.file.generation
            self.index._insert(note, self.active_parent, self.file)
        return note

    def parse_pattern(self, fmt: str, *args: Any) -> Optional[PatternMatch]:
        """Match a sequence of tokens described by ``fmt``.

        Directives: ``%t`` a token with the given text, ``%k`` a token of the
        given base kind, ``%b`` a token of the given sub-kind, ``%n`` an
        identifier naming a note of the given kind, ``%s`` skip soft tokens,
        ``%o`` skip operators. ``%k``, ``%b`` and ``%n`` capture what they
        match. On failure the position is restored and ``None`` returned.
        """
        saved = (self.done, self.it.index, self.active_parent)
        values = iter(args)

        def take() -> Any:
            try:
                return next(values)
            except StopIteration:
                raise ValueError(f"pattern {fmt!r} needs more arguments") from None

        parsed = True
        captures: list[Any] = []
        i = 0
        while i < len(fmt):
            if fmt[i] == "%" and i + 1 < len(fmt):
                directive = fmt[i + 1]
                if directive == "t":
                    text = take()
                    parsed = parsed and self.require_token(text)
                elif directive in ("k", "b"):
                    wanted = take()
                    if parsed:
                        if directive == "k":
                            token = self.require_token_kind(wanted)
                        else:
                            token = self.require_token_sub_kind(wanted)
                        parsed = token is not None
                        captures.append(token)
                elif directive == "n":
                    wanted = take()
                    if parsed:
                        note = self._require_note(wanted)
                        parsed = note is not None
                        captures.append(note)
                elif directive == "s":
                    self.skip_soft_tokens(False)
                elif directive == "o":
                    self.skip_op_tokens()
            i += 1

        if not parsed:
            self.done, self.it.index, self.active_parent = saved
            return None
        return PatternMatch(captures)

    def _require_note(self, kind: NoteKind) -> Optional[Note]:
        token = self.require_token_kind(TokenBaseKind.IDENTIFIER)
        if token is None:
            return None
        head = self.index.lookup_note(self.string_from_token(token), None)
        if head is None or head._chain is None:
            return None
        return next((note for note in head._chain if note.kind == kind), None)