# fleuryindex

Library pieces for editor tooling: tokens and a token iterator, a code
index that indexers fill with notes about definitions, a Metadesk lexer and
indexer, a C/C++ indexer that works on an already-lexed token stream, small
text snippet slots ("legos") and the layout of simple 2D plots as draw
commands. Pure Python, no runtime dependencies.

## Modules

- `fleuryindex.tokens`: `Token` (with `range()` and `end()`),
  `TokenBaseKind`, `TokenBaseFlag` and `TokenIterator`, which reads the
  current token and steps forwards or backwards over all tokens
  (`inc_all`, `dec_all`) or over non-whitespace tokens
  (`inc_non_whitespace`, `dec_non_whitespace`). `token_index_from_pos` and
  `iterator_at_pos` find the token containing a position.
- `fleuryindex.lang`: `LanguageRegistry` maps a name, which is also a file
  extension, to a `Language` holding a lexer, an indexer and an optional
  position-context function. `from_file_name` looks a language up by the
  text after the last dot. `PosContextData`, `push_call_context` and
  `push_dot_context` describe what surrounds a position.
- `fleuryindex.index`: `CodeIndex`, `IndexFile`, `Note`, `NoteKind`,
  `NoteFlag` and `ParseContext`. Indexers walk tokens through a
  `ParseContext` (`require_token`, `require_token_kind`,
  `require_token_sub_kind`, `peek_token`, `skip_soft_tokens`,
  `skip_op_tokens`, `parse_pattern`) and record notes with `make_note`,
  nested under a parent set by `push_parent`/`pop_parent`. Comments are
  scanned for `@` tags and `TODO` markers by `parse_comment`. Clearing a
  file drops its notes and bumps its `generation`.
- `fleuryindex.metadesk`: `MetadeskLexer` (resumable, with an optional
  token budget per call), `lex_metadesk`, `index_metadesk` (records
  `name:` as constants and comment tags) and `metadesk_pos_context`, which
  always returns an empty list.
- `fleuryindex.lang_cpp`: `index_cpp` records structs, unions, enums and
  their constants, typedefs, functions and member functions, top-level
  declarations, `#define` macros and comment tags. `cpp_pos_context`
  returns up to four calls enclosing a position, innermost first, with the
  argument index in each. `CppKind` lists the sub-kinds it relies on.
- `fleuryindex.lego`: `LegoBoard` holds twelve `Lego` slots.
  `from_function_key(n)` maps F1 to F24 onto the first four slots in turn.
  `Lego.store` fills a slot; `Lego.place` inserts a string lego into text
  and returns a `Placement` with the new text, mark and cursor.
- `fleuryindex.plot`: `Plot2D` produces a list of `DrawCommand`s (strings,
  rectangles, an outline and clip changes) for line/point plots with a
  power-of-ten grid (`tick_increment`) and for grouped histograms, inside
  a screen `Rect`.

## Example

```python
from fleuryindex.index import CodeIndex, NoteKind
from fleuryindex.metadesk import index_metadesk, lex_metadesk

text = "greeting: \"hello\"\n// @note remember this\n"
tokens = lex_metadesk(text)

index = CodeIndex()
file = index.lookup_or_make_file("notes.md")
index.parse_file(file, text, tokens, index_metadesk)

note = index.lookup_note("greeting", None)
assert note.kind is NoteKind.CONSTANT
```

Registering a language:

```python
from fleuryindex.lang import LanguageRegistry
from fleuryindex.metadesk import index_metadesk, lex_metadesk, metadesk_pos_context

registry = LanguageRegistry()
registry.register("md", index_metadesk, lex_metadesk, metadesk_pos_context)
language = registry.from_file_name("notes.md")
tokens = language.lex("a: 1")
```

Storing and placing a snippet:

```python
from fleuryindex.lego import LegoBoard, LegoKind

board = LegoBoard()
lego = board.from_function_key(1)
lego.store(LegoKind.STRING, "return 0;")
placement = lego.place("int f() {  }", 10)
assert placement.text == "int f() { return 0; }"
```

Laying out a plot:

```python
from fleuryindex.plot import Plot2D, Plot2DStyle, Rect

plot = Plot2D(screen_rect=Rect(0, 0, 200, 100), plot_view=Rect(0, 0, 10, 10), title="Samples")
plot.begin()
plot.points(Plot2DStyle.POINTS, [1, 2, 3], [1, 4, 9])
plot.end()
for command in plot.commands:
    print(command.kind, command.rect, command.text)
```

## What it does not do

- There is no C or C++ lexer. `index_cpp` and `cpp_pos_context` need a
  token stream whose sub-kinds follow `CppKind`, produced by some other
  lexer.
- There is no Jai support: no Jai lexer, indexer or position context.
- Nothing is drawn on screen. `Plot2D` only builds `DrawCommand` lists,
  and the lego slots work on plain strings rather than editor buffers.
- There is no command-line program.

## Running the tests

```
pip install -e ".[test]"
pytest
```