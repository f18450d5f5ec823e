"""Leaf operations over literal text and token slices.

Each directive of the expansion engine is also usable on its own through
these functions, the same way the stand-alone `string!`, `head!`, ... macros
are used outside of `place!`.
"""
from placemacro.processing.case_ops import convert_case, split_words
from placemacro.processing.slice_ops import (
    dollar,
    head,
    identity,
    ignore,
    last,
    reverse,
    start,
    stringify,
    tail,
    to_case,
)
from placemacro.processing.text_ops import (
    build_identifier,
    build_string,
    concat_text,
    replace_newline,
    replace_newline_tokens,
    str_replace,
    str_replace_tokens,
)

__all__ = [
    "build_identifier",
    "build_string",
    "concat_text",
    "convert_case",
    "dollar",
    "head",
    "identity",
    "ignore",
    "last",
    "replace_newline",
    "replace_newline_tokens",
    "reverse",
    "split_words",
    "start",
    "str_replace",
    "str_replace_tokens",
    "stringify",
    "tail",
    "to_case",
]
