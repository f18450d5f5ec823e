from __future__ import annotations
"""
dispatch – Evaluation rule for each directive kind.

The table is closed: it holds exactly one rule per `DirectiveKind` and is
checked for completeness at import time, so adding a kind without a rule
fails immediately instead of at the first call. Aliases never reach this
module; the recognizer has already resolved them to a kind.
"""

from typing import Callable, Dict, Sequence

from placemacro.parsing.directives import DirectiveCall, DirectiveKind
from placemacro.processing import slice_ops, text_ops
from placemacro.processing.arguments import split_arguments
from placemacro.tokens import Token, TokenStream

Rule = Callable[[DirectiveCall, Sequence[Token]], TokenStream]


def _to_case(call: DirectiveCall, args: Sequence[Token]) -> TokenStream:
    # The directive spelling is the style: __ToCase__ → "ToCase".
    (subject,) = split_arguments(args, 1)
    return slice_ops.to_case_ident(call.name.strip('_'), subject)


RULES: Dict[DirectiveKind, Rule] = {
    DirectiveKind.IGNORE: lambda _c, args: slice_ops.ignore(args),
    DirectiveKind.IDENTITY: lambda _c, args: slice_ops.identity(args),
    DirectiveKind.DOLLAR: lambda _c, args: slice_ops.dollar(args),
    DirectiveKind.STRING: lambda _c, args: text_ops.build_string(args),
    DirectiveKind.IDENTIFIER: lambda _c, args: text_ops.build_identifier(args),
    DirectiveKind.HEAD: lambda _c, args: slice_ops.head(args),
    DirectiveKind.TAIL: lambda _c, args: slice_ops.tail(args),
    DirectiveKind.START: lambda _c, args: slice_ops.start(args),
    DirectiveKind.LAST: lambda _c, args: slice_ops.last(args),
    DirectiveKind.REVERSE: lambda _c, args: slice_ops.reverse(args),
    DirectiveKind.STRINGIFY: lambda _c, args: slice_ops.stringify(args),
    DirectiveKind.REPLACE_NEWLINE: lambda _c, args: text_ops.replace_newline_tokens(tuple(args)),
    DirectiveKind.STR_REPLACE: lambda _c, args: text_ops.str_replace_tokens(tuple(args)),
    DirectiveKind.TO_CASE: _to_case,
}

_missing = set(DirectiveKind) - set(RULES)
if _missing:
    raise RuntimeError(f'no evaluation rule for: {sorted(k.value for k in _missing)}')


def evaluate(call: DirectiveCall, args: Sequence[Token]) -> TokenStream:
    """Evaluate *call* over its fully expanded argument stream *args*."""
    return RULES[call.kind](call, args)
