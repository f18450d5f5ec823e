from __future__ import annotations
"""
text_ops – Literal text operations.

All functions here are pure: they take token streams (already expanded) and
return new tokens. Text is handled in decoded form and re-encoded on the way
out, so escapes in the input never leak into the result.

Concatenation rules shared by `build_string` and `build_identifier`:

  • identifiers contribute their name verbatim
  • literals contribute their value (see `literals.render_value`)
  • groups are flattened, their delimiters contribute nothing
  • punctuation contributes nothing

Callers control spacing by putting whitespace inside string literals:
`"hello" + , ", " {(agent)} ' ' 0x2F` concatenates to "hello, agent 47".
"""

import re
from typing import Iterable, List

from placemacro.errors import InvalidIdentifier
from placemacro.parsing.literals import render_value, string_value
from placemacro.processing.arguments import split_arguments
from placemacro.tokens import Group, Ident, Literal, Token, TokenStream

_NEWLINE_RUN = re.compile(r'\n\s*')
_RAW_PREFIX = 'r#'
# path keywords that have no raw form
_NO_RAW_FORM = frozenset({'crate', 'self', 'super', 'Self'})


def concat_text(tokens: Iterable[Token]) -> str:
    """Concatenate the decoded text of *tokens* (no separators)."""
    out: List[str] = []
    stack = [iter(tokens)]
    while stack:
        tok = next(stack[-1], None)
        if tok is None:
            stack.pop()
            continue
        if isinstance(tok, Group):
            stack.append(iter(tok.stream))
        elif isinstance(tok, Ident):
            out.append(tok.name)
        elif isinstance(tok, Literal):
            out.append(render_value(tok))
    return ''.join(out)


def is_identifier(text: str) -> bool:
    """True for a Unicode identifier (XID start, then XID continue chars) or its `r#` raw form.

    The bare `_` is a pattern, not an identifier, and neither `r#_` nor the
    raw form of a path keyword exists.
    """
    raw = text.startswith(_RAW_PREFIX)
    body = text[len(_RAW_PREFIX):] if raw else text
    if not body.isidentifier() or body == '_':
        return False
    return not (raw and body in _NO_RAW_FORM)


def build_string(tokens: Iterable[Token]) -> TokenStream:
    """String build: one string literal holding the concatenated text."""
    return (Literal.string(concat_text(tokens)),)


def build_identifier(tokens: Iterable[Token]) -> TokenStream:
    """Identifier build: one identifier made of the concatenated text.

    Raises:
        InvalidIdentifier: when the text is empty, starts with a digit or
            holds characters that cannot appear in an identifier.
    """
    text = concat_text(tokens)
    if not is_identifier(text):
        raise InvalidIdentifier(f'`{text}` is not a valid identifier' if text else 'empty identifier')
    return (Ident(text),)


def replace_newline(text: str, replacement: str) -> str:
    """Replace each newline and the whitespace following it with *replacement*."""
    return _NEWLINE_RUN.sub(lambda _m: replacement, text)


def str_replace(text: str, search: str, replacement: str) -> str:
    """Non-overlapping, left-to-right literal replacement.

    Scanning resumes after each match in the original text, so inserted text
    is never searched again.
    """
    return text.replace(search, replacement)


def replace_newline_tokens(tokens: TokenStream) -> TokenStream:
    """`"text", "replacement"` → string literal."""
    text, repl = (string_value(t) for t in split_arguments(tokens, 2))
    return (Literal.string(replace_newline(text, repl)),)


def str_replace_tokens(tokens: TokenStream) -> TokenStream:
    """`"text", "search", "replacement"` → string literal."""
    text, search, repl = (string_value(t) for t in split_arguments(tokens, 3))
    return (Literal.string(str_replace(text, search, repl)),)
