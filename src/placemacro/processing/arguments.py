from __future__ import annotations
"""
arguments – Comma separated argument lists for the literal operations.

`replace_newline`, `str_replace` and `to_case` take a fixed number of single
token arguments separated by commas; one trailing comma is accepted:

    "text", " "          → 2 arguments
    "text", " ",         → 2 arguments
    "text" " "           → MalformedArguments (missing comma)

A parenthesized group holding exactly one token stands for that token, so
`("text")` is accepted wherever `"text"` is.
"""

from typing import List, Sequence

from placemacro.errors import MalformedArguments
from placemacro.tokens import Group, Punct, Token, span_of


def is_comma(tok: object) -> bool:
    return isinstance(tok, Punct) and tok.char == ','


def unwrap(tok: Token) -> Token:
    """Strip groups that hold exactly one token."""
    while isinstance(tok, Group) and len(tok.stream) == 1:
        tok = tok.stream[0]
    return tok


def split_arguments(tokens: Sequence[Token], expected: int) -> List[Token]:
    """Return exactly *expected* single-token arguments from *tokens*.

    Args:
        tokens: The argument stream of one directive call.
        expected: Number of arguments the operation takes.

    Returns:
        The arguments, in order, with single-token groups unwrapped.

    Raises:
        MalformedArguments: on a wrong count or a missing/stray separator.
    """
    args: List[Token] = []
    i, n = 0, len(tokens)
    while i < n:
        tok = tokens[i]
        if is_comma(tok):
            raise MalformedArguments('expected an argument, found `,`', span=span_of(tok))
        args.append(unwrap(tok))
        i += 1
        if i >= n:
            break
        sep = tokens[i]
        if not is_comma(sep):
            raise MalformedArguments('unexpected token in macro invocation, expected `,`', span=span_of(sep))
        i += 1
        if len(args) == expected and i < n:
            raise MalformedArguments(
                f'takes only {expected} argument{"s" if expected != 1 else ""}', span=span_of(tokens[i])
            )

    if len(args) != expected:
        raise MalformedArguments(f'expected {expected} arguments, got {len(args)}')
    return args
