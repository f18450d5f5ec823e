from __future__ import annotations

"""
ExpansionEngine – the reverse-order, fixed-point directive expander.

One pass works like this:

    1) The recognizer lists every directive call with its depth.
    2) The deepest call is picked; ties go to the earliest discovered
       stream and, inside it, to the rightmost call.
    3) The call is evaluated over its argument stream.
    4) The result replaces the call (name + group, or the bare marker).
       It is wrapped so later scans treat it as opaque: output of a pass is
       never expanded again by that same pass.
    5) Repeat until no call is left.

Each step removes exactly one call, so a pass always terminates; the step
bound only guards against pathological input sizes. A failing call aborts
the pass and nothing of the partially rewritten stream escapes.

Staging works by running more passes: `__identity__(__string__(a))` gives
`__string__(a)` after one pass and `"a"` after two.
"""

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple

from placemacro.errors import ExpansionError, ExpansionLimitExceeded
from placemacro.logging.helpers import get_logger, trace_call
from placemacro.parsing.directives import DirectiveCall, DirectiveRecognizer
from placemacro.runtime import dispatch
from placemacro.runtime.config import EngineConfig
from placemacro.tokens import Group, Token, TokenStream


@dataclass(frozen=True)
class _Resolved:
    """Output of an evaluated call, opaque to the rest of the pass."""
    tokens: TokenStream


def _splice(items: Sequence[object], path: Tuple[int, ...], width: int, new: object) -> Tuple[object, ...]:
    """Return *items* with the *width* entries at *path* replaced by *new*."""
    head, rest = path[0], path[1:]
    if not rest:
        return (*items[:head], new, *items[head + width:])
    group = items[head]
    return (*items[:head], group.with_stream(_splice(group.stream, rest, width, new)), *items[head + 1:])


def _flatten(items: Iterable[object]) -> TokenStream:
    """Inline every `_Resolved` chunk, rebuilding groups on the way."""
    out: List[Token] = []
    for item in items:
        if isinstance(item, _Resolved):
            out.extend(item.tokens)
        elif isinstance(item, Group):
            out.append(item.with_stream(_flatten(item.stream)))
        else:
            out.append(item)
    return tuple(out)


class ExpansionEngine:
    """Expand directive calls in token streams.

    Instances hold configuration only; every call works on its own copy of
    the stream, so one engine can be shared between threads.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        *,
        recognizer: Optional[DirectiveRecognizer] = None,
    ) -> None:
        self._cfg = config or EngineConfig()
        self._log = self._cfg.logger or get_logger('engine')
        self._recognizer = recognizer or DirectiveRecognizer(logger=self._log)

    @property
    def config(self) -> EngineConfig:
        return self._cfg

    # ----------------------------------------------------------------- public

    def has_directives(self, tokens: Sequence[Token]) -> bool:
        return self._recognizer.has_calls(tuple(tokens))

    def expand_once(self, tokens: Iterable[Token]) -> TokenStream:
        """Run a single pass over *tokens* and return the expanded stream."""
        items: Tuple[object, ...] = tuple(tokens)
        steps = 0
        while True:
            call = self._recognizer.next_call(items)
            if call is None:
                break
            steps += 1
            if steps > self._cfg.max_steps:
                raise ExpansionLimitExceeded(
                    f'expansion did not finish within {self._cfg.max_steps} steps',
                    directive=call.name,
                    span=call.span,
                    depth=call.depth,
                )
            items = _splice(items, call.path, call.width, _Resolved(self._evaluate(call)))

        self._log.debug('pass finished after %d step(s)', steps)
        return _flatten(items)

    def expand(self, tokens: Iterable[Token], *, passes: Optional[int] = None) -> TokenStream:
        """Run *passes* passes (default: `EngineConfig.passes`)."""
        count = self._cfg.passes if passes is None else passes
        if count < 1:
            raise ValueError('passes must be >= 1')
        out = tuple(tokens)
        for _ in range(count):
            out = self.expand_once(out)
        return out

    def expand_until_stable(self, tokens: Iterable[Token], *, max_passes: Optional[int] = None) -> TokenStream:
        """Run passes until no directive call is left.

        Raises:
            ExpansionLimitExceeded: if calls remain after *max_passes* passes
                (default: `EngineConfig.max_passes`).
        """
        limit = self._cfg.max_passes if max_passes is None else max_passes
        out = tuple(tokens)
        for done in range(limit):
            if not self.has_directives(out):
                self._log.debug('stable after %d pass(es)', done)
                return out
            out = self.expand_once(out)
        if self.has_directives(out):
            raise ExpansionLimitExceeded(f'directives still present after {limit} passes')
        return out

    # ---------------------------------------------------------------- private

    def _evaluate(self, call: DirectiveCall) -> TokenStream:
        args = _flatten(call.arguments)
        trace_call(self._log, 'evaluate', call, path=call.path, args=len(args))
        try:
            out = dispatch.evaluate(call, args)
        except ExpansionError as exc:
            exc.located(directive=call.name, span=call.span, depth=call.depth)
            raise
        if call.span is None:
            return out
        # generated tokens take the position of the call they replace
        return tuple(tok if tok.span is not None else replace(tok, span=call.span) for tok in out)
