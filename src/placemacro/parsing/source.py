from __future__ import annotations
"""Token positions.

Every lexed token carries a `Span` telling where it starts. Generated tokens
take the span of the call that produced them, so diagnostics and the
line-preserving renderer still have a position to work with. Spans are
compared by the token model as payload-free metadata: they never affect
token equality.
"""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class Span:
    """Start position of a token.

    Attributes:
        path: Source file, None for text given directly.
        line: 1-based line number.
        col:  1-based column number.
    """
    path: Optional[Path] = None
    line: int = 1
    col: int = 1

    def format(self) -> str:
        """Compiler-style `file:line:col`, with `<input>` standing in for a missing path."""
        return f"{self.path or '<input>'}:{self.line}:{self.col}"

    def moved_to(self, line: int, col: int) -> "Span":
        """Same file, another position."""
        return replace(self, line=line, col=col)
