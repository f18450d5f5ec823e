from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import NoReturn, Optional, Sequence, TextIO, Tuple

from placemacro.errors import ExpansionError
from placemacro.logging.helpers import get_logger, setup_base_logger
from placemacro.parsing.lexer import Lexer
from placemacro.parsing.parser import _build_parser
from placemacro.rendering.renderer import render
from placemacro.runtime.config import EngineConfig
from placemacro.runtime.engine import ExpansionEngine


logger = get_logger('placemacro')


def _configure_logging(enable_json: bool, verbose: bool = False) -> None:
    """Configure process-wide logging once, either JSON or plain text."""
    mode = (bool(enable_json), bool(verbose))
    prev = getattr(_configure_logging, '_configured_mode', None)
    if prev is not None and prev == mode:
        return
    lg = setup_base_logger(json_logs=enable_json, level=logging.DEBUG if verbose else logging.INFO)
    global logger
    logger = lg
    setattr(_configure_logging, '_configured_mode', mode)


def _read_source(source: str, stdin: Optional[TextIO]) -> Tuple[str, Optional[Path]]:
    """Return (text, path) for FILE, reading stdin for '-'."""
    if source == '-':
        return (stdin or sys.stdin).read(), None
    path = Path(source)
    if not path.is_file():
        raise FileNotFoundError(f'source file {path} not found')
    return path.read_text(encoding='utf-8'), path


def _emit(text: str, ns: argparse.Namespace, stdout: Optional[TextIO]) -> None:
    if ns.output:
        out_path = Path(ns.output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding='utf-8')
        logger.info('✔ output written → %s', out_path)
    else:
        (stdout or sys.stdout).write(text)


class PlaceMacro:
    """Top-level façade for command-style execution."""

    @staticmethod
    def run(argv: Sequence[str], *, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> str:
        """Run the tool with given argv-like sequence and return the rendered output.

        Expansion errors propagate to the caller. With --compile-errors the
        host-native `compile_error!("...")` form is written first.
        """
        ns = _build_parser().parse_args(list(argv))
        json_logs = ns.json_logs or os.getenv('PLACEMACRO_JSON_LOGS') == '1'
        _configure_logging(json_logs, ns.verbose)

        text, path = _read_source(ns.source, stdin)
        cfg = EngineConfig.from_env(
            passes=ns.passes,
            max_steps=ns.max_steps,
            max_passes=ns.max_passes,
            logger=get_logger('engine'),
        )
        engine = ExpansionEngine(cfg)

        try:
            tokens = Lexer(text, path=path).run()
            if ns.until_stable:
                result = engine.expand_until_stable(tokens)
            else:
                result = engine.expand(tokens)
        except ExpansionError as exc:
            if ns.compile_errors:
                _emit(render(exc.to_compile_error()) + '\n', ns, stdout)
            raise

        rendered = render(result, preserve_lines=ns.preserve_lines) + '\n'
        _emit(rendered, ns, stdout)
        return rendered


def main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """Entry point for `python -m placemacro` and the `placemacro` script."""
    try:
        PlaceMacro.run(sys.argv[1:] if argv is None else argv)
        raise SystemExit(0)
    except KeyboardInterrupt:
        logger.error('Interrupted by user.')
        raise SystemExit(130)
    except BrokenPipeError:
        raise SystemExit(0)
    except ExpansionError as exc:
        logger.error('expansion failed: %s', exc)
        raise SystemExit(1)
    except (OSError, ValueError) as exc:
        if os.getenv('DEBUG') == '1':
            raise
        logger.error('%s', exc)
        raise SystemExit(1)


if __name__ == '__main__':
    main()
