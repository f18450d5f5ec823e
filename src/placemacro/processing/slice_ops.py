from __future__ import annotations
"""
slice_ops – Token slice operations and the other structural directives.

Every function takes the (already expanded) argument stream of a call and
returns the replacement stream. The four slicing operations refuse empty
input with `EmptySequence` instead of silently producing nothing.
"""

from typing import Sequence

from placemacro.constants import DOLLAR_CHAR
from placemacro.errors import EmptySequence, InvalidIdentifier, MalformedArguments, NonLiteralArgument
from placemacro.parsing.literals import string_value
from placemacro.processing.arguments import split_arguments
from placemacro.processing.case_ops import convert_case
from placemacro.processing.text_ops import is_identifier
from placemacro.rendering.renderer import render
from placemacro.tokens import Ident, Literal, Punct, Spacing, Token, TokenStream, span_of


def _require_tokens(tokens: Sequence[Token], op: str) -> None:
    if not tokens:
        raise EmptySequence(f'`{op}` needs at least one token')


def head(tokens: Sequence[Token]) -> TokenStream:
    _require_tokens(tokens, 'head')
    return (tokens[0],)


def tail(tokens: Sequence[Token]) -> TokenStream:
    _require_tokens(tokens, 'tail')
    return tuple(tokens[1:])


def start(tokens: Sequence[Token]) -> TokenStream:
    _require_tokens(tokens, 'start')
    return tuple(tokens[:-1])


def last(tokens: Sequence[Token]) -> TokenStream:
    _require_tokens(tokens, 'last')
    return (tokens[-1],)


def reverse(tokens: Sequence[Token]) -> TokenStream:
    """Reverse top-level order; group contents are left untouched."""
    return tuple(reversed(tokens))


def identity(tokens: Sequence[Token]) -> TokenStream:
    return tuple(tokens)


def ignore(tokens: Sequence[Token]) -> TokenStream:
    return ()


def stringify(tokens: Sequence[Token]) -> TokenStream:
    """Source-like text of *tokens* as a single string literal."""
    return (Literal.string(render(tokens)),)


def dollar(tokens: Sequence[Token] = ()) -> TokenStream:
    if tokens:
        raise MalformedArguments('`dollar` takes no arguments', span=span_of(tokens[0]))
    return (Punct(DOLLAR_CHAR, Spacing.ALONE),)


def to_case_ident(style: str, subject: Token) -> TokenStream:
    """Convert identifier *subject* to *style*, returning one identifier."""
    if not isinstance(subject, Ident):
        raise NonLiteralArgument('expected identifier', span=span_of(subject))
    raw, name = ('r#', subject.name[2:]) if subject.name.startswith('r#') else ('', subject.name)
    try:
        converted = raw + convert_case(name, style)
    except InvalidIdentifier as exc:
        exc.located(span=span_of(subject))
        raise
    if not is_identifier(converted):
        raise InvalidIdentifier(
            f"`{subject.name}` converts to `{converted}`, which is not an identifier", span=span_of(subject)
        )
    return (Ident(converted),)


def to_case(tokens: Sequence[Token]) -> TokenStream:
    """`"Style", ident` → ident in that style (stand-alone form)."""
    style_tok, subject = split_arguments(tokens, 2)
    return to_case_ident(string_value(style_tok), subject)
