from __future__ import annotations

"""Project-wide constants used across modules.

This module isolates public constants to reduce cross-module coupling.
"""

# Escape marker of the host macro system, produced by the dollar directive.
DOLLAR_CHAR: str = '$'

# Upper bound of rewrite steps in a single pass (PLACEMACRO_MAX_STEPS).
DEFAULT_MAX_STEPS: int = 100_000

# Number of passes run by `expand` unless told otherwise (PLACEMACRO_PASSES).
DEFAULT_PASSES: int = 1

# Safety net for `expand_until_stable`.
DEFAULT_MAX_PASSES: int = 64

# Name of the host-native error macro used by `ExpansionError.to_compile_error`.
COMPILE_ERROR_MACRO: str = 'compile_error'
