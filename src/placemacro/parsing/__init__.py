"""Host-side parsing helpers: source spans, literal codec, lexer and directive recognition."""
__all__ = [
    "directives",
    "lexer",
    "literals",
    "parser",
    "source",
]
