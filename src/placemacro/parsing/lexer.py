from __future__ import annotations

"""
Lexer – host-side adapter turning Rust-flavoured source text into tokens.

The expansion engine only ever consumes token streams; this class exists so
that callers (the CLI, tests, scripts) can obtain one from text. It follows
the usual single-pass scanner approach:

    * Whitespace and comments ('//', nested '/* */') are skipped.
    * Identifiers (including raw 'r#ident') become `Ident`.
    * String, raw string, byte string, char, byte, integer and float
      literals become `Literal` in their source spelling.
    * `'ident` (lifetimes/labels) become a joint `'` followed by `Ident`.
    * Any other punctuation character becomes `Punct`; it is JOINT when the
      very next character is punctuation as well ('->' vs '- >'), but not
      when that character opens a char literal (',' in "(a,'b')").
    * Brackets open and close `Group`s; mismatches raise `UnmatchedGroup`.

Every token receives a `Span` (path, line, col) for diagnostics.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from placemacro.errors import LexError, UnmatchedGroup
from placemacro.logging.helpers import get_logger
from placemacro.parsing.literals import parse_float, parse_integer
from placemacro.parsing.source import Span
from placemacro.tokens import (
    Delimiter,
    Group,
    Ident,
    Literal,
    LiteralKind,
    Punct,
    Spacing,
    Token,
    TokenStream,
)

PUNCT_CHARS = frozenset("!#$%&*+,-./:;<=>?@^|~'")


def _is_ident_start(ch: str) -> bool:
    return ch == '_' or ch.isalpha()


def _is_ident_continue(ch: str) -> bool:
    return ch == '_' or ch.isalnum()


class Lexer:
    """Single-use scanner over one source text."""

    def __init__(self, text: str, *, path: Optional[Path] = None, logger: Optional[logging.Logger] = None) -> None:
        self._text = text
        self._n = len(text)
        self._i = 0
        self._line = 1
        self._col = 1
        self._src = Span(path=path)
        self._log = logger or get_logger('lexer')

    # ------------------------------------------------------------------ public

    @classmethod
    def tokenize(cls, text: str, *, path: Optional[Path] = None) -> TokenStream:
        """Convenience classmethod: lex *text* in a single call."""
        return cls(text, path=path).run()

    def run(self) -> TokenStream:
        # Each frame: (delimiter, span of the opening bracket, collected tokens)
        frames: List[Tuple[Delimiter, Optional[Span], List[Token]]] = [(Delimiter.NONE, None, [])]

        while True:
            self._skip_trivia()
            if self._i >= self._n:
                break
            ch = self._text[self._i]
            span = self._span()

            opened = Delimiter.for_open(ch)
            if opened is not None:
                self._advance(1)
                frames.append((opened, span, []))
                continue

            closed = Delimiter.for_close(ch)
            if closed is not None:
                delim, open_span, toks = frames[-1]
                if len(frames) == 1:
                    raise UnmatchedGroup(f"unexpected closing delimiter {ch!r}", span=span)
                if delim is not closed:
                    raise UnmatchedGroup(
                        f"mismatched closing delimiter {ch!r}, expected {delim.close!r}", span=span
                    )
                self._advance(1)
                frames.pop()
                frames[-1][2].append(Group(delim, tuple(toks), open_span))
                continue

            frames[-1][2].extend(self._next_tokens(span))

        if len(frames) > 1:
            delim, open_span, _ = frames[-1]
            raise UnmatchedGroup(f"unclosed delimiter {delim.open!r}", span=open_span)

        out = tuple(frames[0][2])
        self._log.debug('lexed %d top-level tokens from %s', len(out), self._src.format())
        return out

    # ----------------------------------------------------------------- helpers

    def _span(self) -> Span:
        return self._src.moved_to(self._line, self._col)

    def _peek(self, offset: int = 0) -> str:
        j = self._i + offset
        return self._text[j] if j < self._n else ''

    def _advance(self, count: int) -> str:
        chunk = self._text[self._i:self._i + count]
        for ch in chunk:
            if ch == '\n':
                self._line += 1
                self._col = 1
            else:
                self._col += 1
        self._i += len(chunk)
        return chunk

    def _skip_trivia(self) -> None:
        while self._i < self._n:
            ch = self._peek()
            if ch.isspace():
                self._advance(1)
            elif ch == '/' and self._peek(1) == '/':
                while self._i < self._n and self._peek() != '\n':
                    self._advance(1)
            elif ch == '/' and self._peek(1) == '*':
                self._skip_block_comment()
            else:
                return

    def _skip_block_comment(self) -> None:
        start = self._span()
        depth = 0
        while self._i < self._n:
            if self._peek() == '/' and self._peek(1) == '*':
                depth += 1
                self._advance(2)
            elif self._peek() == '*' and self._peek(1) == '/':
                depth -= 1
                self._advance(2)
                if depth == 0:
                    return
            else:
                self._advance(1)
        raise LexError('unterminated block comment', span=start)

    def _next_tokens(self, span: Span) -> List[Token]:
        ch = self._peek()
        nxt = self._peek(1)

        if ch == 'r' and nxt == '#' and _is_ident_start(self._peek(2)):
            self._advance(2)
            return [Ident('r#' + self._read_ident_tail(), span)]
        if ch == 'r' and nxt in ('"', '#'):
            return [Literal(LiteralKind.RAW_STRING, self._read_raw_string(prefix=1, span=span), span)]
        if ch == 'b' and nxt == 'r' and self._peek(2) in ('"', '#'):
            return [Literal(LiteralKind.BYTE_STRING, self._read_raw_string(prefix=2, span=span), span)]
        if ch == 'b' and nxt == '"':
            self._advance(1)
            return [Literal(LiteralKind.BYTE_STRING, 'b' + self._read_quoted('"', span), span)]
        if ch == 'b' and nxt == "'":
            self._advance(1)
            return [Literal(LiteralKind.BYTE, 'b' + self._read_quoted("'", span), span)]
        if _is_ident_start(ch):
            return [Ident(self._read_ident_tail(), span)]
        if ch.isdigit():
            return [self._read_number(span)]
        if ch == '"':
            return [Literal(LiteralKind.STRING, self._read_quoted('"', span), span)]
        if ch == "'":
            if self._char_literal_at(0):
                return [Literal(LiteralKind.CHAR, self._read_quoted("'", span), span)]
            # lifetime or label: the quote binds to the identifier after it
            self._advance(1)
            return [Punct("'", Spacing.JOINT, span)]
        if ch in PUNCT_CHARS:
            self._advance(1)
            nxt = self._peek()
            joint = nxt and nxt in PUNCT_CHARS and not self._char_literal_at(0)
            spacing = Spacing.JOINT if joint else Spacing.ALONE
            return [Punct(ch, spacing, span)]
        raise LexError(f'unexpected character {ch!r}', span=span)

    def _char_literal_at(self, offset: int) -> bool:
        """True when a quote at *offset* opens a char literal rather than a lifetime."""
        if self._peek(offset) != "'":
            return False
        nxt = self._peek(offset + 1)
        return nxt == '\\' or (bool(nxt) and self._peek(offset + 2) == "'")

    def _read_ident_tail(self) -> str:
        start = self._i
        while self._i < self._n and _is_ident_continue(self._peek()):
            self._advance(1)
        return self._text[start:self._i]

    def _read_quoted(self, quote: str, span: Span) -> str:
        start = self._i
        self._advance(1)
        while self._i < self._n:
            ch = self._peek()
            if ch == '\\':
                self._advance(2)
                continue
            self._advance(1)
            if ch == quote:
                return self._text[start:self._i]
        kind = 'string' if quote == '"' else 'character'
        raise LexError(f'unterminated {kind} literal', span=span)

    def _read_raw_string(self, *, prefix: int, span: Span) -> str:
        start = self._i
        self._advance(prefix)
        hashes = 0
        while self._peek() == '#':
            hashes += 1
            self._advance(1)
        if self._peek() != '"':
            raise LexError('malformed raw string literal', span=span)
        self._advance(1)
        terminator = '"' + '#' * hashes
        end = self._text.find(terminator, self._i)
        if end == -1:
            raise LexError('unterminated raw string literal', span=span)
        self._advance(end + len(terminator) - self._i)
        return self._text[start:self._i]

    def _read_number(self, span: Span) -> Literal:
        start = self._i
        is_float = False
        if self._peek() == '0' and self._peek(1) in ('x', 'o', 'b'):
            self._advance(2)
            while _is_ident_continue(self._peek()) and self._peek():
                self._advance(1)
        else:
            self._consume_digits()
            if self._peek() == '.' and self._peek(1) != '.' and not _is_ident_start(self._peek(1) or '0'):
                is_float = True
                self._advance(1)
                self._consume_digits()
            if self._peek() in ('e', 'E') and (
                self._peek(1).isdigit() or (self._peek(1) in ('+', '-') and self._peek(2).isdigit())
            ):
                is_float = True
                self._advance(2)
                self._consume_digits()
            if _is_ident_start(self._peek()):
                suffix = self._read_ident_tail()
                is_float = is_float or suffix in ('f32', 'f64')

        text = self._text[start:self._i]
        kind = LiteralKind.FLOAT if is_float else LiteralKind.INTEGER
        try:
            (parse_float if is_float else parse_integer)(text)
        except LexError as exc:
            exc.located(span=span)
            raise
        return Literal(kind, text, span)

    def _consume_digits(self) -> None:
        while self._peek() and (self._peek().isdigit() or self._peek() == '_'):
            self._advance(1)


def tokenize(text: str, *, path: Optional[Path] = None) -> TokenStream:
    """Lex *text* into a token stream (see `Lexer`)."""
    return Lexer.tokenize(text, path=path)
