from __future__ import annotations
"""
case_ops – Identifier case conversion.

An identifier is first split into words on underscores, on case boundaries
and on letter/digit boundaries, then the words are joined again in the
target style:

    my_var, myVar, MY_VAR   → my|var, my|Var, MY|VAR
    HTTPServer              → HTTP|Server
    item2, Item2, item_2    → item|2
    café_bar, CaféBar       → café|bar, Café|Bar

Letters are classified with `str.isupper()` / `str.isnumeric()`, so any
Unicode identifier segments; uncased letters count as lowercase. Characters
that can never appear in an identifier raise `InvalidIdentifier`.

Styles are named by how the word "to case" itself looks in that style, which
is also how the `__ToCase__(...)` directive spelling selects one. A few plain
English aliases are accepted too.
"""

from typing import Callable, Dict, List

from placemacro.errors import InvalidIdentifier, UnknownCaseStyle

_LOWER, _UPPER, _DIGIT = 'lower', 'upper', 'digit'


def _char_class(ch: str) -> str:
    if ch.isnumeric():
        return _DIGIT
    if ch.isupper():
        return _UPPER
    return _LOWER


def _segment(part: str) -> List[str]:
    """Split one underscore-free chunk into words."""
    words: List[str] = []
    start = 0
    classes = [_char_class(ch) for ch in part]
    for i in range(1, len(part)):
        prev, cur = classes[i - 1], classes[i]
        nxt = classes[i + 1] if i + 1 < len(part) else None
        boundary = (
            (prev == _DIGIT) != (cur == _DIGIT)
            or (prev == _LOWER and cur == _UPPER)
            # acronym end: HTTP|Server
            or (prev == _UPPER and cur == _UPPER and nxt == _LOWER)
        )
        if boundary:
            words.append(part[start:i])
            start = i
    if part:
        words.append(part[start:])
    return words


def split_words(ident: str) -> List[str]:
    """Split *ident* on underscores, case changes and letter/digit changes."""
    bad = [ch for ch in ident if ch != '_' and not ch.isalnum()]
    if bad:
        raise InvalidIdentifier(f'cannot split `{ident}` into words: unexpected {bad[0]!r}')
    words: List[str] = []
    for part in ident.split('_'):
        words.extend(_segment(part))
    return words


def _cap(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def _camel(words: List[str]) -> str:
    if not words:
        return ''
    return words[0].lower() + ''.join(_cap(w) for w in words[1:])


CASE_STYLES: Dict[str, Callable[[List[str]], str]] = {
    'TOCASE': lambda ws: ''.join(w.upper() for w in ws),
    'tocase': lambda ws: ''.join(w.lower() for w in ws),
    'toCase': _camel,
    'ToCase': lambda ws: ''.join(_cap(w) for w in ws),
    'to_case': lambda ws: '_'.join(w.lower() for w in ws),
    'TO_CASE': lambda ws: '_'.join(w.upper() for w in ws),
}

STYLE_ALIASES: Dict[str, str] = {
    'upper': 'TOCASE',
    'upper_flat': 'TOCASE',
    'lower': 'tocase',
    'flat': 'tocase',
    'camel': 'toCase',
    'pascal': 'ToCase',
    'snake': 'to_case',
    'upper_snake': 'TO_CASE',
    'constant': 'TO_CASE',
}


def resolve_style(style: str) -> str:
    """Return the canonical style key for *style* or raise `UnknownCaseStyle`."""
    if style in CASE_STYLES:
        return style
    alias = STYLE_ALIASES.get(style.lower())
    if alias is None:
        known = ', '.join([*CASE_STYLES, *STYLE_ALIASES])
        raise UnknownCaseStyle(f"unknown case specifier '{style}' (expected one of: {known})")
    return alias


def convert_case(ident: str, style: str) -> str:
    """Convert identifier text *ident* to *style*."""
    return CASE_STYLES[resolve_style(style)](split_words(ident))
