from __future__ import annotations

"""
tokens – Immutable token model shared by every component.

A token is one of:

  • Ident(name)                     → identifiers and keywords
  • Literal(kind, text)             → literals, *text* is the source spelling
  • Punct(char, spacing)            → single punctuation characters
  • Group(delimiter, stream)        → bracketed sub-streams

A `TokenStream` is a plain tuple of tokens. Spacing on `Punct` is what keeps
`->` (joint '-' then '>') distinct from `- >` when a stream is rendered back
to text. Spans never take part in equality so that lexed streams compare
equal to hand-built ones.
"""

import enum
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Tuple, Union

from placemacro.parsing.source import Span


class Delimiter(enum.Enum):
    PARENTHESIS = ('(', ')')
    BRACKET = ('[', ']')
    BRACE = ('{', '}')
    NONE = ('', '')

    @property
    def open(self) -> str:
        return self.value[0]

    @property
    def close(self) -> str:
        return self.value[1]

    @classmethod
    def for_open(cls, ch: str) -> Optional["Delimiter"]:
        for d in cls:
            if d is not cls.NONE and d.open == ch:
                return d
        return None

    @classmethod
    def for_close(cls, ch: str) -> Optional["Delimiter"]:
        for d in cls:
            if d is not cls.NONE and d.close == ch:
                return d
        return None


class Spacing(enum.Enum):
    ALONE = 'alone'
    JOINT = 'joint'


class LiteralKind(enum.Enum):
    STRING = 'string'
    RAW_STRING = 'raw_string'
    BYTE_STRING = 'byte_string'
    CHAR = 'char'
    BYTE = 'byte'
    INTEGER = 'integer'
    FLOAT = 'float'

    @property
    def is_str(self) -> bool:
        """True for the kinds whose value is text usable by string operations."""
        return self in (LiteralKind.STRING, LiteralKind.RAW_STRING)


@dataclass(frozen=True)
class Ident:
    name: str
    span: Optional[Span] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Literal:
    kind: LiteralKind
    text: str
    span: Optional[Span] = field(default=None, compare=False, repr=False)

    @classmethod
    def string(cls, value: str, span: Optional[Span] = None) -> "Literal":
        """Build a string literal whose decoded value is *value*."""
        from placemacro.parsing.literals import encode_string

        return cls(LiteralKind.STRING, encode_string(value), span)

    @property
    def value(self) -> Union[str, int, float]:
        """Decoded value of the literal (see `placemacro.parsing.literals.decode`)."""
        from placemacro.parsing.literals import decode

        return decode(self)

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Punct:
    char: str
    spacing: Spacing = Spacing.ALONE
    span: Optional[Span] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return self.char


@dataclass(frozen=True)
class Group:
    delimiter: Delimiter
    stream: "TokenStream" = ()
    span: Optional[Span] = field(default=None, compare=False, repr=False)

    def with_stream(self, stream: Iterable["Token"]) -> "Group":
        """Return a copy of this group holding *stream* instead."""
        return replace(self, stream=tuple(stream))


Token = Union[Ident, Literal, Punct, Group]
TokenStream = Tuple[Token, ...]


def span_of(token: object) -> Optional[Span]:
    return getattr(token, 'span', None)
