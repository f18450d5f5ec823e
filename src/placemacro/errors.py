from __future__ import annotations

"""Error types raised while lexing or expanding a token stream.

Every failure is an `ExpansionError`. The first error aborts the whole pass;
nothing is retried and no partially rewritten stream is returned. Errors
carry the directive name, its nesting depth and the span of the call so a
host can point the diagnostic at the right place, either by formatting the
exception or by emitting `to_compile_error()` in place of the output.
"""

from typing import Optional

from placemacro.constants import COMPILE_ERROR_MACRO
from placemacro.parsing.source import Span


class ExpansionError(ValueError):
    """Base class of every lexing/expansion failure."""

    def __init__(
        self,
        message: str,
        *,
        directive: Optional[str] = None,
        span: Optional[Span] = None,
        depth: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.directive = directive
        self.span = span
        self.depth = depth

    def located(
        self,
        *,
        directive: Optional[str] = None,
        span: Optional[Span] = None,
        depth: Optional[int] = None,
    ) -> "ExpansionError":
        """Fill in positional context that is still missing and return self."""
        if self.directive is None:
            self.directive = directive
        if self.span is None:
            self.span = span
        if self.depth is None:
            self.depth = depth
        return self

    def __str__(self) -> str:
        where: list[str] = []
        if self.directive:
            where.append(f"in `{self.directive}`")
        if self.span is not None:
            where.append(f"at {self.span.format()}")
        if self.depth is not None:
            where.append(f"depth {self.depth}")
        return f"{self.message} ({', '.join(where)})" if where else self.message

    def to_compile_error(self):
        """Render this error as the host-native `compile_error!("...")` tokens."""
        from placemacro.tokens import Delimiter, Group, Ident, Literal, Punct

        return (
            Ident(COMPILE_ERROR_MACRO, self.span),
            Punct('!'),
            Group(Delimiter.PARENTHESIS, (Literal.string(self.message),), self.span),
        )


class EmptySequence(ExpansionError):
    """A slice operation received zero tokens."""


class InvalidIdentifier(ExpansionError):
    """Identifier build produced text that is not an identifier."""


class UnknownCaseStyle(ExpansionError):
    """Case conversion was asked for a style it does not know."""


class UnmatchedGroup(ExpansionError):
    """A directive lacks its argument group, or delimiters do not balance."""


class NonLiteralArgument(ExpansionError):
    """A literal/identifier was required where something else was given."""


class MalformedArguments(ExpansionError):
    """Wrong number of arguments or a missing/unexpected separator."""


class ExpansionLimitExceeded(ExpansionError):
    """The configured step or pass bound was reached."""


class LexError(ExpansionError):
    """Source text could not be split into tokens."""
