# placemacro/parsing/parser.py
from __future__ import annotations

import argparse


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {raw!r}") from exc
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    """
    Build the CLI argument parser.

    Notes:
        - Limits left unset fall back to PLACEMACRO_* environment variables
          and then to the built-in defaults (see EngineConfig.from_env).
    """
    p = argparse.ArgumentParser(
        prog="placemacro",
        formatter_class=argparse.RawTextHelpFormatter,
        usage="%(prog)s [FILE] [OPTIONS]",
        description=(
            "placemacro – expand __directive__(...) calls in reverse expansion order\n"
            "Reads FILE (or stdin when FILE is '-' or missing), expands every "
            "directive call and prints the resulting tokens."
        ),
    )

    g_exp = p.add_argument_group("Expansion")
    g_out = p.add_argument_group("Output")
    g_misc = p.add_argument_group("Miscellaneous")

    p.add_argument(
        "source",
        metavar="FILE",
        nargs="?",
        default="-",
        help="Source file holding the token stream. Defaults to stdin.",
    )

    # -----------------------
    # Expansion
    # -----------------------
    g_exp.add_argument(
        "-p",
        "--passes",
        metavar="N",
        type=_positive_int,
        dest="passes",
        help=(
            "Number of passes to run. Each pass expands everything outside "
            "__identity__(...); later passes expand what earlier ones deferred."
        ),
    )
    g_exp.add_argument(
        "-u",
        "--until-stable",
        action="store_true",
        dest="until_stable",
        help="Keep running passes until no directive call is left (bounded by --max-passes).",
    )
    g_exp.add_argument(
        "--max-passes",
        metavar="N",
        type=_positive_int,
        dest="max_passes",
        help="Upper bound for --until-stable (env: PLACEMACRO_MAX_PASSES).",
    )
    g_exp.add_argument(
        "--max-steps",
        metavar="N",
        type=_positive_int,
        dest="max_steps",
        help="Rewrite steps allowed per pass (env: PLACEMACRO_MAX_STEPS).",
    )

    # -----------------------
    # Output
    # -----------------------
    g_out.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        dest="output",
        help="Write the result to FILE instead of stdout.",
    )
    g_out.add_argument(
        "-l",
        "--preserve-lines",
        action="store_true",
        dest="preserve_lines",
        help="Keep tokens that came from the input on their original lines.",
    )
    g_out.add_argument(
        "-e",
        "--compile-errors",
        action="store_true",
        dest="compile_errors",
        help="On failure print compile_error!(\"...\") instead of only logging the error.",
    )

    # -----------------------
    # Miscellaneous
    # -----------------------
    g_misc.add_argument(
        "--json-logs",
        action="store_true",
        dest="json_logs",
        help="Emit logs as JSON lines on stderr (env: PLACEMACRO_JSON_LOGS=1).",
    )
    g_misc.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        dest="verbose",
        help="Log debug messages (set PLACEMACRO_TRACE=1 for per-step traces).",
    )
    return p
