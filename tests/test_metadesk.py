import pytest

from fleuryindex.index import CodeIndex, NoteKind
from fleuryindex.metadesk import (
    MDTokenSubKind,
    MetadeskLexer,
    char_is_symbol,
    index_metadesk,
    lex_metadesk,
    metadesk_pos_context,
)
from fleuryindex.tokens import TokenBaseKind

SAMPLE = 'node: { @tag child: "str", 3.5e2 -> x; /* block */ } // line\n`q` \u00e9'


def _texts(text, tokens):
    return [text[t.pos:t.end()] for t in tokens]


def _indexed(text):
    index = CodeIndex()
    file = index.lookup_or_make_file("sample.mdesk")
    index.parse_file(file, text, lex_metadesk(text), index_metadesk)
    return index, file


@pytest.mark.parametrize("c", list("~!@#$%^&*()-=+[]{}:;,<.>/?|\\"))
def test_symbols(c):
    assert char_is_symbol(c) is True


@pytest.mark.parametrize("c", list("a0_ \"'`\n"))
def test_non_symbols(c):
    assert char_is_symbol(c) is False


def test_simple_definition():
    text = "foo: 1"
    tokens = lex_metadesk(text)
    assert [t.kind for t in tokens] == [
        TokenBaseKind.IDENTIFIER,
        TokenBaseKind.OPERATOR,
        TokenBaseKind.WHITESPACE,
        TokenBaseKind.LITERAL_FLOAT,
        TokenBaseKind.EOF,
    ]
    assert _texts(text, tokens[:-1]) == ["foo", ":", " ", "1"]


def test_tokens_cover_text_contiguously():
    tokens = lex_metadesk(SAMPLE)
    assert tokens[0].pos == 0
    for before, after in zip(tokens, tokens[1:-1]):
        assert before.end() == after.pos
    assert tokens[-2].end() == len(SAMPLE)
    assert tokens[-1].kind == TokenBaseKind.EOF
    assert tokens[-1].pos == len(SAMPLE)


def test_empty_text_gives_only_eof():
    tokens = lex_metadesk("")
    assert len(tokens) == 1
    assert tokens[0].kind == TokenBaseKind.EOF
    assert tokens[0].pos == 0


def test_line_comment_stops_at_newline():
    text = "// hi\nx"
    tokens = lex_metadesk(text)
    assert tokens[0].kind == TokenBaseKind.COMMENT
    assert _texts(text, tokens[:1]) == ["// hi"]
    assert tokens[1].kind == TokenBaseKind.WHITESPACE


def test_block_comment():
    text = "/* a */b"
    tokens = lex_metadesk(text)
    assert _texts(text, tokens[:2]) == ["/* a */", "b"]
    assert tokens[0].kind == TokenBaseKind.COMMENT
    assert tokens[1].kind == TokenBaseKind.IDENTIFIER


def test_unterminated_block_comment_ends_at_text_end():
    text = "/* a"
    tokens = lex_metadesk(text)
    assert tokens[0].kind == TokenBaseKind.COMMENT
    assert tokens[0].end() == len(text)
    assert tokens[1].pos == len(text)


def test_unterminated_string_ends_at_text_end():
    text = '"abc'
    tokens = lex_metadesk(text)
    assert tokens[0].kind == TokenBaseKind.LITERAL_STRING
    assert tokens[0].end() == len(text)


def test_tag_token():
    text = "@tag foo"
    tokens = lex_metadesk(text)
    assert tokens[0].kind == TokenBaseKind.IDENTIFIER
    assert tokens[0].sub_kind == MDTokenSubKind.TAG
    assert _texts(text, tokens[:1]) == ["@tag"]
    assert tokens[2].sub_kind == MDTokenSubKind.NULL


def test_arrow_is_statement_close_then_operator():
    tokens = lex_metadesk("a->b")
    assert [t.kind for t in tokens] == [
        TokenBaseKind.IDENTIFIER,
        TokenBaseKind.STATEMENT_CLOSE,
        TokenBaseKind.OPERATOR,
        TokenBaseKind.IDENTIFIER,
        TokenBaseKind.EOF,
    ]


def test_brackets():
    tokens = lex_metadesk("{([])}")
    assert [t.kind for t in tokens[:-1]] == [
        TokenBaseKind.SCOPE_OPEN,
        TokenBaseKind.PARENTHETICAL_OPEN,
        TokenBaseKind.PARENTHETICAL_OPEN,
        TokenBaseKind.PARENTHETICAL_CLOSE,
        TokenBaseKind.PARENTHETICAL_CLOSE,
        TokenBaseKind.SCOPE_CLOSE,
    ]


def test_non_ascii_is_lex_error():
    tokens = lex_metadesk("\u00e9")
    assert tokens[0].kind == TokenBaseKind.LEX_ERROR
    assert tokens[0].size == 1


def test_chunked_lexing_matches_full_lex():
    lexer = MetadeskLexer(SAMPLE)
    collected = []
    while not lexer.finished:
        chunk = lexer.lex(2)
        assert len(chunk) <= 3
        collected.extend(chunk)
    assert collected == lex_metadesk(SAMPLE)


def test_finished_lexer_produces_nothing_more():
    lexer = MetadeskLexer("x")
    first = lexer.lex()
    assert first[-1].kind == TokenBaseKind.EOF
    assert lexer.lex() == []


def test_index_definitions():
    index, file = _indexed("foo: 1\nbar baz: 2")
    foo = index.lookup_note("foo")
    baz = index.lookup_note("baz")
    assert foo.kind == NoteKind.CONSTANT
    assert baz.kind == NoteKind.CONSTANT
    assert index.lookup_note("bar") is None
    assert [note.string for note in file.notes] == ["foo", "baz"]


def test_index_comment_notes():
    text = "// TODO fix\n/* @mark */\n"
    index, file = _indexed(text)
    kinds = [note.kind for note in file.notes]
    assert kinds == [NoteKind.COMMENT_TODO, NoteKind.COMMENT_TAG]
    assert file.notes[0].string == "TODO fix"
    assert file.notes[1].string.startswith("@mark")


def test_pos_context_is_empty():
    text = "foo: 1"
    assert metadesk_pos_context(CodeIndex(), text, lex_metadesk(text), 2) == []