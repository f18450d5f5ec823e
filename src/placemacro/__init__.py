from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Union

from placemacro.errors import (
    EmptySequence,
    ExpansionError,
    ExpansionLimitExceeded,
    InvalidIdentifier,
    LexError,
    MalformedArguments,
    NonLiteralArgument,
    UnknownCaseStyle,
    UnmatchedGroup,
)
from placemacro.parsing.directives import DirectiveCall, DirectiveKind, DirectiveRecognizer, lookup_directive
from placemacro.parsing.lexer import Lexer, tokenize
from placemacro.parsing.source import Span
from placemacro.rendering.renderer import Renderer, render
from placemacro.runtime.config import EngineConfig
from placemacro.runtime.engine import ExpansionEngine
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

__version__ = '0.2.0'


def expand(
    source: Union[str, Iterable[Token]],
    *,
    passes: Optional[int] = None,
    max_steps: Optional[int] = None,
    path: Optional[Path] = None,
) -> TokenStream:
    """Expand every directive call in *source*.

    *source* is either a token stream or text, which is lexed first. Limits
    not given here come from `EngineConfig.from_env()`.
    """
    tokens = tokenize(source, path=path) if isinstance(source, str) else tuple(source)
    engine = ExpansionEngine(EngineConfig.from_env(passes=passes, max_steps=max_steps))
    return engine.expand(tokens)


def place(text: str, *, passes: Optional[int] = None, max_steps: Optional[int] = None) -> str:
    """Lex *text*, expand it and render the result back to text."""
    return render(expand(text, passes=passes, max_steps=max_steps))


__all__ = [
    'Delimiter',
    'DirectiveCall',
    'DirectiveKind',
    'DirectiveRecognizer',
    'EmptySequence',
    'EngineConfig',
    'ExpansionEngine',
    'ExpansionError',
    'ExpansionLimitExceeded',
    'Group',
    'Ident',
    'InvalidIdentifier',
    'LexError',
    'Lexer',
    'Literal',
    'LiteralKind',
    'MalformedArguments',
    'NonLiteralArgument',
    'Punct',
    'Renderer',
    'Spacing',
    'Span',
    'Token',
    'TokenStream',
    'UnknownCaseStyle',
    'UnmatchedGroup',
    'expand',
    'lookup_directive',
    'place',
    'render',
    'tokenize',
]
