"""Logging helpers for placemacro."""
from placemacro.logging.helpers import get_logger, setup_base_logger, trace_call

__all__ = ["get_logger", "setup_base_logger", "trace_call"]
