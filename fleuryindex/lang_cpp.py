"""Indexer and positional context for C and C++ token streams."""

from __future__ import annotations

from enum import IntEnum, auto
from typing import Any, Optional, Sequence

from fleuryindex.index import NoteFlag, NoteKind, ParseContext
from fleuryindex.lang import PosContextData, push_call_context
from fleuryindex.tokens import Token, TokenBaseKind, iterator_at_pos

_MAX_CALL_CONTEXTS = 4


class CppKind(IntEnum):
    """Sub-kinds of C and C++ tokens that the indexer distinguishes."""

    EOF = auto()
    WHITESPACE = auto()
    LEX_ERROR = auto()
    BLOCK_COMMENT = auto()
    LINE_COMMENT = auto()
    IDENTIFIER = auto()
    KEYWORD_GENERIC = auto()
    LITERAL_INTEGER = auto()
    LITERAL_FLOAT = auto()
    LITERAL_STRING = auto()
    BRACE_OP = auto()
    BRACE_CL = auto()
    PAREN_OP = auto()
    PAREN_CL = auto()
    BRACK_OP = auto()
    BRACK_CL = auto()
    SEMICOLON = auto()
    COMMA = auto()
    COLON = auto()
    COLON_COLON = auto()
    DOT = auto()
    ARROW = auto()
    EQ = auto()
    STAR = auto()
    AND = auto()
    OPERATOR_GENERIC = auto()
    PP_INCLUDE = auto()
    PP_DEFINE = auto()
    PP_UNDEF = auto()
    PP_IF = auto()
    PP_IF_DEF = auto()
    PP_IF_N_DEF = auto()
    PP_ELSE = auto()
    PP_EL_IF = auto()
    PP_END_IF = auto()
    PP_ERROR = auto()
    PP_PRAGMA = auto()
    PP_UNKNOWN = auto()


_BASE_TYPE_KINDS = (TokenBaseKind.IDENTIFIER, TokenBaseKind.KEYWORD)


def parse_macro_definition(ctx: ParseContext) -> None:
    """Record the macro named after ``#define`` and skip its body."""
    match = ctx.parse_pattern("%k", TokenBaseKind.IDENTIFIER)
    if match:
        name = match[0]
        last_parent = ctx.push_parent(None)
        ctx.make_note(*name.range(), NoteKind.MACRO)
        ctx.pop_parent(last_parent)
        ctx.skip_soft_tokens(True)


def skip_parse_body(ctx: ParseContext) -> bool:
    """Skip a braced body, still indexing comments and macros inside it.

    Returns whether a body was found at the current position.
    """
    body_found = False
    nest = 0
    while not ctx.done:
        if match := ctx.parse_pattern("%k", TokenBaseKind.COMMENT):
            ctx.parse_comment(match[0])
        elif ctx.parse_pattern("%b", CppKind.PP_DEFINE):
            parse_macro_definition(ctx)
        elif ctx.parse_pattern("%t", "{"):
            nest += 1
            body_found = True
        elif ctx.parse_pattern("%t", "}"):
            nest -= 1
            if nest == 0:
                break
        elif not body_found:
            break
        else:
            ctx.inc(True)
    return body_found


def parse_decl(ctx: ParseContext) -> Optional[Token]:
    """Match ``Type name;`` or ``Type name =``; returns the name token."""
    for terminator, fmt in ((";", "%k%o%k%o%t"), ("=", "%k%o%k%t")):
        for base_kind in _BASE_TYPE_KINDS:
            match = ctx.parse_pattern(
                fmt, base_kind, TokenBaseKind.IDENTIFIER, terminator
            )
            if match:
                return match[1]
    return None


def _parse_struct_or_union(ctx: ParseContext, flags: NoteFlag) -> None:
    match = ctx.parse_pattern("%k", TokenBaseKind.IDENTIFIER)
    name = match[0] if match else None
    need_end_name = name is None

    if not skip_parse_body(ctx):
        flags |= NoteFlag.PROTOTYPE

    if need_end_name:
        match = ctx.parse_pattern("%k", TokenBaseKind.IDENTIFIER)
        if match:
            name = match[0]

    if name is not None:
        ctx.make_note(*name.range(), NoteKind.TYPE, flags)


def _parse_function_body(ctx: ParseContext) -> tuple[bool, bool]:
    """Find the ``;`` or ``{`` ending a function head; returns (valid, prototype)."""
    valid = False
    prototype = False
    while not ctx.done:
        token = ctx.it.read()
        if token is None:
            break
        if token.sub_kind == CppKind.SEMICOLON:
            valid = True
            prototype = True
            break
        if token.kind == TokenBaseKind.SCOPE_OPEN:
            valid = True
            break
        ctx.inc(False)

    if valid and not prototype:
        skip_parse_body(ctx)
    return valid, prototype


def _skip_enum_value(ctx: ParseContext) -> None:
    while not ctx.done:
        token = ctx.it.read()
        if token is None:
            ctx.done = True
            break
        if token.kind == TokenBaseKind.STATEMENT_CLOSE:
            ctx.inc(False)
            break
        if token.kind in (TokenBaseKind.SCOPE_CLOSE, TokenBaseKind.SCOPE_OPEN):
            break
        ctx.inc(False)


def _parse_enum_body(ctx: ParseContext) -> None:
    if not ctx.parse_pattern("%t", "{"):
        return
    while not ctx.done:
        if match := ctx.parse_pattern("%k%t", TokenBaseKind.IDENTIFIER, ","):
            ctx.make_note(*match[0].range(), NoteKind.CONSTANT)
        elif match := ctx.parse_pattern("%k%t", TokenBaseKind.IDENTIFIER, "="):
            ctx.make_note(*match[0].range(), NoteKind.CONSTANT)
            _skip_enum_value(ctx)
        elif match := ctx.parse_pattern("%k", TokenBaseKind.IDENTIFIER):
            ctx.make_note(*match[0].range(), NoteKind.CONSTANT)
        elif ctx.parse_pattern("%t", "}"):
            break
        else:
            ctx.inc(False)


def _parse_enum(ctx: ParseContext, name: Optional[Token], name_may_follow: bool) -> None:
    prototype = bool(ctx.parse_pattern("%t", ";"))
    if not prototype:
        _parse_enum_body(ctx)
    if name_may_follow and name is None:
        match = ctx.parse_pattern("%k", TokenBaseKind.IDENTIFIER)
        if match:
            name = match[0]
    if name is not None:
        flags = NoteFlag.PROTOTYPE if prototype else NoteFlag.NONE
        ctx.make_note(*name.range(), NoteKind.TYPE, flags)


def _parse_pure_typedef(ctx: ParseContext) -> None:
    name: Optional[Token] = None
    nest = 0
    sum_type = False
    while not ctx.done:
        if ctx.parse_pattern("%t", "("):
            nest += 1
        elif nest == 0 and (match := ctx.parse_pattern("%k", TokenBaseKind.IDENTIFIER)):
            name = match[0]
            named = ctx.index.lookup_note(ctx.string_from_token(name), None)
            if (
                named is not None
                and named.kind == NoteKind.TYPE
                and named.flags & NoteFlag.SUM_TYPE
            ):
                sum_type = True
        elif ctx.parse_pattern("%t", ";"):
            break
        else:
            ctx.inc(False)
    if name is not None:
        flags = NoteFlag.SUM_TYPE if sum_type else NoteFlag.NONE
        ctx.make_note(*name.range(), NoteKind.TYPE, flags)


def _match_function_head(ctx: ParseContext) -> Optional[Token]:
    for base_kind in _BASE_TYPE_KINDS:
        match = ctx.parse_pattern("%k%o%k%t", base_kind, TokenBaseKind.IDENTIFIER, "(")
        if match:
            return match[1]
    return None


def _match_member_function_head(ctx: ParseContext) -> Optional[Token]:
    for base_kind in _BASE_TYPE_KINDS:
        match = ctx.parse_pattern(
            "%k%o%n%t%k%t",
            base_kind,
            NoteKind.TYPE,
            "::",
            TokenBaseKind.IDENTIFIER,
            "(",
        )
        if match:
            return match[2]
    return None


def index_cpp(ctx: ParseContext) -> None:
    """Index the types, functions, declarations, macros and comment tags of a file."""
    scope_nest = 0
    while not ctx.done:
        handled = True

        if ctx.parse_pattern("%t%t%t", "extern", "C", "{"):
            pass
        elif ctx.parse_pattern("%t", "{"):
            scope_nest += 1
        elif ctx.parse_pattern("%t", "}"):
            scope_nest = max(0, scope_nest - 1)

        elif ctx.parse_pattern("%t", "struct"):
            _parse_struct_or_union(ctx, NoteFlag.PRODUCT_TYPE)
        elif ctx.parse_pattern("%t%t", "typedef", "struct"):
            _parse_struct_or_union(ctx, NoteFlag.NONE)
            if match := ctx.parse_pattern("%k", TokenBaseKind.IDENTIFIER):
                ctx.make_note(*match[0].range(), NoteKind.TYPE, NoteFlag.PRODUCT_TYPE)

        elif ctx.parse_pattern("%t", "union"):
            _parse_struct_or_union(ctx, NoteFlag.SUM_TYPE)
        elif ctx.parse_pattern("%t%t", "typedef", "union"):
            _parse_struct_or_union(ctx, NoteFlag.SUM_TYPE)
            if match := ctx.parse_pattern("%k", TokenBaseKind.IDENTIFIER):
                ctx.make_note(*match[0].range(), NoteKind.TYPE, NoteFlag.SUM_TYPE)

        elif (
            match := ctx.parse_pattern("%t%t%k", "typedef", "enum", TokenBaseKind.IDENTIFIER)
        ) or ctx.parse_pattern("%t%t", "typedef", "enum"):
            _parse_enum(ctx, match[0] if match else None, name_may_follow=True)

        elif (
            match := ctx.parse_pattern("%t%k", "enum", TokenBaseKind.IDENTIFIER)
        ) or ctx.parse_pattern("%t", "enum"):
            _parse_enum(ctx, match[0] if match else None, name_may_follow=False)

        elif ctx.parse_pattern("%t", "typedef"):
            _parse_pure_typedef(ctx)

        elif scope_nest == 0 and (name := _match_function_head(ctx)):
            valid, prototype = _parse_function_body(ctx)
            if valid:
                flags = NoteFlag.PROTOTYPE if prototype else NoteFlag.NONE
                ctx.make_note(*name.range(), NoteKind.FUNCTION, flags)

        elif scope_nest == 0 and (name := _match_member_function_head(ctx)):
            valid, prototype = _parse_function_body(ctx)
            if valid:
                flags = NoteFlag.PRODUCT_TYPE if prototype else NoteFlag.NONE
                ctx.make_note(*name.range(), NoteKind.FUNCTION, flags)

        elif scope_nest == 0 and (name := parse_decl(ctx)):
            ctx.make_note(*name.range(), NoteKind.DECL)

        elif match := ctx.parse_pattern("%k", TokenBaseKind.COMMENT):
            ctx.parse_comment(match[0])

        elif ctx.parse_pattern("%b", CppKind.PP_DEFINE):
            parse_macro_definition(ctx)

        else:
            handled = False

        if not handled:
            ctx.inc(False)


def cpp_pos_context(
    index: Any, text: str, tokens: Sequence[Token], pos: int
) -> list[PosContextData]:
    """The calls enclosing ``pos``, innermost first, with the argument index in each."""
    results: list[PosContextData] = []
    it = iterator_at_pos(tokens, pos)
    paren_nest = 0
    arg_idx = 0
    step = 0
    while len(results) < _MAX_CALL_CONTEXTS:
        token = it.read()
        if token is None:
            break
        if (
            paren_nest == 0
            and token.sub_kind == CppKind.PAREN_OP
            and it.dec_non_whitespace()
        ):
            name = it.read()
            if name is not None and name.kind == TokenBaseKind.IDENTIFIER:
                push_call_context(index, results, text[name.pos:name.end()], arg_idx)
                arg_idx = 0
        elif token.sub_kind == CppKind.PAREN_OP:
            paren_nest -= 1
        elif token.sub_kind == CppKind.PAREN_CL and step > 0:
            paren_nest += 1
        elif token.sub_kind == CppKind.COMMA and step > 0 and paren_nest == 0:
            arg_idx += 1
        if not it.dec_non_whitespace():
            break
        step += 1
    return results