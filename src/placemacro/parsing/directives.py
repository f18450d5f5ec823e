from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from placemacro.errors import UnmatchedGroup
from placemacro.logging.helpers import get_logger
from placemacro.parsing.source import Span
from placemacro.tokens import Group, Ident, Token


class DirectiveKind(enum.Enum):
    IGNORE = 'ignore'
    IDENTITY = 'identity'
    DOLLAR = 'dollar'
    STRING = 'string'
    IDENTIFIER = 'identifier'
    HEAD = 'head'
    TAIL = 'tail'
    START = 'start'
    LAST = 'last'
    REVERSE = 'reverse'
    STRINGIFY = 'stringify'
    REPLACE_NEWLINE = 'replace_newline'
    STR_REPLACE = 'str_replace'
    TO_CASE = 'to_case'


# Directive names, short aliases included. ToCase is matched separately
# because every letter-case spelling of its name is a distinct style.
DIRECTIVE_NAMES: Dict[str, DirectiveKind] = {
    '__ignore__': DirectiveKind.IGNORE,
    '__identity__': DirectiveKind.IDENTITY,
    '__id__': DirectiveKind.IDENTITY,
    '__dollar__': DirectiveKind.DOLLAR,
    '__s__': DirectiveKind.DOLLAR,
    '__string__': DirectiveKind.STRING,
    '__str__': DirectiveKind.STRING,
    '__identifier__': DirectiveKind.IDENTIFIER,
    '__ident__': DirectiveKind.IDENTIFIER,
    '__head__': DirectiveKind.HEAD,
    '__tail__': DirectiveKind.TAIL,
    '__start__': DirectiveKind.START,
    '__last__': DirectiveKind.LAST,
    '__reverse__': DirectiveKind.REVERSE,
    '__stringify__': DirectiveKind.STRINGIFY,
    '__strfy__': DirectiveKind.STRINGIFY,
    '__replace_newline__': DirectiveKind.REPLACE_NEWLINE,
    '__repnl__': DirectiveKind.REPLACE_NEWLINE,
    '__str_replace__': DirectiveKind.STR_REPLACE,
    '__repstr__': DirectiveKind.STR_REPLACE,
}

_TO_CASE_NAMES = frozenset({'__tocase__', '__to_case__'})


def lookup_directive(name: str) -> Optional[DirectiveKind]:
    """Resolve a directive name (or alias) to its kind, None if not a directive."""
    kind = DIRECTIVE_NAMES.get(name)
    if kind is not None:
        return kind
    if name.startswith('__') and name.endswith('__') and name.lower() in _TO_CASE_NAMES:
        return DirectiveKind.TO_CASE
    return None


@dataclass(frozen=True)
class DirectiveCall:
    """One call site found by the recognizer.

    Attributes:
        kind: Directive kind after alias resolution.
        name: Spelling used at the call site (selects the ToCase style).
        arguments: Contents of the argument group, empty for Dollar.
        path: Group indices leading to the containing stream, then the index
            of the directive name inside it.
        width: Tokens covered by the call (2 for name + group, 1 for Dollar).
        depth: Number of enclosing directive argument groups.
        sequence: Discovery order of the containing stream (pre-order).
        span: Source span of the directive name, when known.
    """
    kind: DirectiveKind
    name: str
    arguments: Tuple[object, ...]
    path: Tuple[int, ...]
    width: int
    depth: int
    sequence: int
    span: Optional[Span] = None

    @property
    def index(self) -> int:
        return self.path[-1]

    def order_key(self) -> Tuple[int, int, int]:
        """Deepest first; then the earliest discovered stream; then rightmost."""
        return (self.depth, -self.sequence, self.index)


class DirectiveRecognizer:
    """Find directive call sites in a token stream.

    The scan recurses into every group, plain or directive argument, except
    the argument of Identity, which stays opaque for the whole pass. Items
    that are neither identifiers nor groups are skipped, which is how the
    engine keeps already-evaluated output out of the scan.
    """

    def __init__(self, *, logger: Optional[logging.Logger] = None) -> None:
        self._log = logger or get_logger('recognizer')

    def find_calls(self, tokens: Sequence[Token]) -> List[DirectiveCall]:
        calls: List[DirectiveCall] = []
        self._scan(tokens, depth=0, prefix=(), calls=calls, counter=[0])
        return calls

    def next_call(self, tokens: Sequence[Token]) -> Optional[DirectiveCall]:
        """Return the call to evaluate next in reverse expansion order."""
        calls = self.find_calls(tokens)
        if not calls:
            return None
        return max(calls, key=DirectiveCall.order_key)

    def has_calls(self, tokens: Sequence[Token]) -> bool:
        return bool(self.find_calls(tokens))

    def _scan(
        self,
        tokens: Sequence[Token],
        *,
        depth: int,
        prefix: Tuple[int, ...],
        calls: List[DirectiveCall],
        counter: List[int],
    ) -> None:
        sequence = counter[0]
        counter[0] += 1
        i, n = 0, len(tokens)
        while i < n:
            tok = tokens[i]
            if isinstance(tok, Group):
                self._scan(tok.stream, depth=depth, prefix=prefix + (i,), calls=calls, counter=counter)
                i += 1
                continue
            kind = lookup_directive(tok.name) if isinstance(tok, Ident) else None
            if kind is None:
                i += 1
                continue

            if kind is DirectiveKind.DOLLAR:
                calls.append(DirectiveCall(kind, tok.name, (), prefix + (i,), 1, depth, sequence, tok.span))
                i += 1
                continue

            group = tokens[i + 1] if i + 1 < n else None
            if not isinstance(group, Group):
                raise UnmatchedGroup(
                    f"expected '(' after `{tok.name}`", directive=tok.name, span=tok.span, depth=depth
                )
            calls.append(
                DirectiveCall(kind, tok.name, tuple(group.stream), prefix + (i,), 2, depth, sequence, tok.span)
            )
            if kind is not DirectiveKind.IDENTITY:
                self._scan(group.stream, depth=depth + 1, prefix=prefix + (i + 1,), calls=calls, counter=counter)
            i += 2
