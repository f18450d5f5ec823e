from __future__ import annotations
"""
literals – Decode and encode literal tokens.

The lexer keeps every literal in its source spelling (`Literal.text`). This
module turns that spelling into a value and back:

  • "a\\tb", r#"raw"#     → str (escapes resolved, raw delimiters removed)
  • 'x', '\\u{1F600}'     → str of length 1
  • 0x2F, 1_000u32       → int
  • 2.50f32, 1e3         → float
  • b'a', b"bytes"       → kept in source spelling

`render_value` gives the text a literal contributes to string/identifier
building. Floats use the shortest round-tripping decimal without exponent
and without a trailing ".0", so `1.0` becomes "1" and `2.50` becomes "2.5".
"""

import re
from decimal import Decimal
from typing import Union

from placemacro.errors import LexError, NonLiteralArgument
from placemacro.tokens import Literal, LiteralKind

_SIMPLE_ESCAPES = {
    'n': '\n',
    'r': '\r',
    't': '\t',
    '\\': '\\',
    '0': '\0',
    "'": "'",
    '"': '"',
}

_ENCODE_ESCAPES = {
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
    '\\': '\\\\',
    '\0': '\\0',
    '"': '\\"',
}

_INT_RX = re.compile(
    r"^(?P<body>0x[0-9a-fA-F_]+|0o[0-7_]+|0b[01_]+|[0-9][0-9_]*)"
    r"(?P<suffix>[iu](?:8|16|32|64|128|size))?$"
)
_FLOAT_SUFFIX_RX = re.compile(r"(f32|f64)$")


def unescape(body: str) -> str:
    """Resolve Rust-style escapes in the body of a quoted literal.

    A backslash followed by a newline drops the newline and the leading
    whitespace of the next line (string continuation).
    """
    out: list[str] = []
    i, n = 0, len(body)
    while i < n:
        ch = body[i]
        if ch != '\\':
            out.append(ch)
            i += 1
            continue
        if i + 1 >= n:
            raise LexError('dangling backslash in literal')
        esc = body[i + 1]
        if esc in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[esc])
            i += 2
        elif esc == 'x':
            digits = body[i + 2:i + 4]
            if len(digits) != 2 or not re.fullmatch(r'[0-9a-fA-F]{2}', digits):
                raise LexError(f'invalid \\x escape: {body[i:i + 4]!r}')
            out.append(chr(int(digits, 16)))
            i += 4
        elif esc == 'u':
            end = body.find('}', i)
            if body[i + 2:i + 3] != '{' or end == -1:
                raise LexError('invalid unicode escape, expected \\u{...}')
            digits = body[i + 3:end].replace('_', '')
            try:
                out.append(chr(int(digits, 16)))
            except ValueError as exc:
                raise LexError(f'invalid unicode escape: \\u{{{digits}}}') from exc
            i = end + 1
        elif esc in ('\n', '\r'):
            i += 2
            while i < n and body[i].isspace():
                i += 1
        else:
            raise LexError(f'unknown character escape: \\{esc}')
    return ''.join(out)


def encode_string(value: str) -> str:
    """Return the quoted source spelling of a string literal holding *value*."""
    out: list[str] = ['"']
    for ch in value:
        if ch in _ENCODE_ESCAPES:
            out.append(_ENCODE_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f'\\u{{{ord(ch):x}}}')
        else:
            out.append(ch)
    out.append('"')
    return ''.join(out)


def _strip_raw(text: str) -> str:
    # r#"..."# / br#"..."#: drop the prefix, the hashes and the quotes.
    body = text.lstrip('br')
    hashes = len(body) - len(body.lstrip('#'))
    return body[hashes + 1:len(body) - hashes - 1]


def parse_integer(text: str) -> int:
    m = _INT_RX.match(text)
    if not m:
        raise LexError(f'invalid integer literal: {text!r}')
    body = m.group('body').replace('_', '')
    if body.startswith(('0x', '0o', '0b')):
        return int(body, 0)
    return int(body, 10)


def parse_float(text: str) -> float:
    body = _FLOAT_SUFFIX_RX.sub('', text).replace('_', '')
    try:
        return float(body)
    except ValueError as exc:
        raise LexError(f'invalid float literal: {text!r}') from exc


def format_float(value: float) -> str:
    """Shortest decimal spelling, never in exponent form, no trailing '.0'."""
    text = format(Decimal(repr(value)), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


def decode(lit: Literal) -> Union[str, int, float]:
    """Return the value of *lit*; byte literals decode to their spelling."""
    kind, text = lit.kind, lit.text
    if kind is LiteralKind.STRING:
        return unescape(text[1:-1])
    if kind is LiteralKind.RAW_STRING:
        return _strip_raw(text)
    if kind is LiteralKind.CHAR:
        return unescape(text[1:-1])
    if kind is LiteralKind.INTEGER:
        return parse_integer(text)
    if kind is LiteralKind.FLOAT:
        return parse_float(text)
    return text


def render_value(lit: Literal) -> str:
    """Text contributed by *lit* when building strings and identifiers."""
    value = decode(lit)
    if lit.kind is LiteralKind.FLOAT:
        return format_float(float(value))
    return str(value)


def string_value(lit: object) -> str:
    """Return the text of a string literal or raise `NonLiteralArgument`."""
    if isinstance(lit, Literal) and lit.kind.is_str:
        return str(decode(lit))
    raise NonLiteralArgument('expected string literal', span=getattr(lit, 'span', None))
