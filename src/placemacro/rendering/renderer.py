from __future__ import annotations

"""
renderer – Turn token streams back into source-like text.

Two layouts are supported:

  • compact (default): tokens separated by one space, with a few places
    where no space is written because it would never change tokenization:
      - after a JOINT punctuation ('->', "&'a", '::')
      - after '$' ('$name', '$(...)*')
      - before ',' and ';'
      - before a lone '!' between an identifier and a group ('name!(..)')
      - between an identifier, '!' or '#' and a following (...) / [...]
        group ('f(x)', 'name!(..)', '#[doc]')
    Groups render as open delimiter + contents + close delimiter with no
    inner padding. This is the layout `stringify` uses.
  • preserve_lines: tokens that carry a span starting on a later line than
    the previous one are placed on a new line at their original column,
    which keeps lexed input readable when the CLI prints it back.

Literals render in their source spelling, never decoded.
"""

from typing import Iterable, List, Optional

from placemacro.tokens import Delimiter, Group, Ident, Literal, Punct, Spacing, Token

_CALL_DELIMS = (Delimiter.PARENTHESIS, Delimiter.BRACKET)


def _glues(prev: Optional[Token], tok: Token, nxt: Optional[Token] = None) -> bool:
    """True when no space is written between *prev* and *tok*; *nxt* follows *tok*."""
    if prev is None:
        return True
    if isinstance(prev, Punct) and (prev.spacing is Spacing.JOINT or prev.char == '$'):
        return True
    if isinstance(tok, Punct) and tok.char in (',', ';'):
        return True
    if isinstance(tok, Punct) and tok.char == '!' and tok.spacing is Spacing.ALONE:
        return isinstance(prev, Ident) and isinstance(nxt, Group)
    if isinstance(tok, Group) and tok.delimiter in _CALL_DELIMS:
        return isinstance(prev, Ident) or (isinstance(prev, Punct) and prev.char in ('!', '#'))
    return False


class Renderer:
    """Render token streams to text."""

    def __init__(self, *, preserve_lines: bool = False) -> None:
        self._preserve = bool(preserve_lines)
        self._line: Optional[int] = None

    def render(self, tokens: Iterable[Token]) -> str:
        out: List[str] = []
        self._line = None
        self._emit(tokens, out)
        return ''.join(out)

    def _emit(self, tokens: Iterable[Token], out: List[str]) -> None:
        prev: Optional[Token] = None
        items = list(tokens)
        for i, tok in enumerate(items):
            nxt = items[i + 1] if i + 1 < len(items) else None
            self._separate(prev, tok, nxt, out)
            if isinstance(tok, Group):
                out.append(tok.delimiter.open)
                self._emit(tok.stream, out)
                out.append(tok.delimiter.close)
            elif isinstance(tok, Punct):
                out.append(tok.char)
            elif isinstance(tok, (Ident, Literal)):
                out.append(str(tok))
            else:
                raise TypeError(f'not a token: {tok!r}')
            prev = tok

    def _separate(self, prev: Optional[Token], tok: Token, nxt: Optional[Token], out: List[str]) -> None:
        span = getattr(tok, 'span', None)
        if self._preserve and span is not None:
            if self._line is not None and span.line > self._line:
                out.append('\n' * (span.line - self._line))
                out.append(' ' * max(span.col - 1, 0))
                self._line = span.line
                return
            self._line = span.line
        if not _glues(prev, tok, nxt):
            out.append(' ')


def render(tokens: Iterable[Token], *, preserve_lines: bool = False) -> str:
    """Render *tokens* to text (see `Renderer`)."""
    return Renderer(preserve_lines=preserve_lines).render(tokens)
