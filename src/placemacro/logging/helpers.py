from __future__ import annotations

"""Logging for placemacro: logger names, handler setup and expansion traces.

    - get_logger: loggers live under 'placemacro.*' ('engine', 'lexer', ...).
    - setup_base_logger: one stderr handler on 'placemacro', plain or JSON.
    - trace_call: one debug record per evaluated directive call, only when
      PLACEMACRO_TRACE=1, with the call's name, depth and position as
      structured context.

JSON records carry ts/level/module/msg/version and, for traces, a ctx
object, so a trace of a whole run can be filtered with ordinary JSON tools.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

BASE_LOGGER = "placemacro"
TRACE_ENV = "PLACEMACRO_TRACE"

_PLAIN_FORMAT = "%(levelname)s: %(message)s"


class JsonLogFormatter(logging.Formatter):
    """One compact JSON object per record.

    Fields:
        - ts: UTC timestamp, millisecond precision, 'Z' suffix.
        - level / module / msg: level name, logger name, formatted message.
        - version: placemacro.__version__, read once per formatter.
        - ctx: the record's 'context' mapping, when there is one.
    """

    def __init__(self) -> None:
        super().__init__()
        self._version = self._resolve_version()

    @staticmethod
    def _resolve_version() -> str:
        # imported late: placemacro/__init__ imports modules that import this one
        try:
            from placemacro import __version__ as _v
            return str(_v)
        except ImportError:
            return os.getenv("PLACEMACRO_VERSION", "unknown")

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: Dict[str, Any] = {
            "ts": ts.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
            "version": self._version,
        }
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict) and ctx:
            payload["ctx"] = ctx
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_base_logger(
    *, json_logs: bool = False, level: int = logging.INFO, stream: Optional[TextIO] = None
) -> logging.Logger:
    """Give the 'placemacro' logger a single handler and return it.

    Calling it again switches the format and level of the existing handler
    instead of stacking a second one.
    """
    base = logging.getLogger(BASE_LOGGER)
    base.setLevel(level)
    base.propagate = False

    if not base.handlers:
        base.addHandler(logging.StreamHandler(stream or sys.stderr))
    for handler in base.handlers:
        handler.setFormatter(JsonLogFormatter() if json_logs else logging.Formatter(_PLAIN_FORMAT))
    return base


def get_logger(name: str | None = None) -> logging.Logger:
    """Return *name* as a child of 'placemacro' (the base logger for None)."""
    if not name or name == BASE_LOGGER:
        return logging.getLogger(BASE_LOGGER)
    if name.startswith(BASE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{BASE_LOGGER}.{name}")


def is_trace_enabled() -> bool:
    return os.getenv(TRACE_ENV) == "1"


def trace_call(logger: logging.Logger, message: str, call: Any, **extra: Any) -> None:
    """Debug-log one step of the expansion of *call* when tracing is on.

    *call* is a `DirectiveCall`; its name, depth and source position become
    the record context, merged with *extra*.
    """
    if not is_trace_enabled() or not logger.isEnabledFor(logging.DEBUG):
        return
    span = getattr(call, "span", None)
    ctx: Dict[str, Any] = {
        "directive": call.name,
        "depth": call.depth,
        "at": span.format() if span is not None else None,
        **extra,
    }
    logger.debug("%s %s at depth %d", message, call.name, call.depth, extra={"context": ctx})
