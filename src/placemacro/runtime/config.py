from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from placemacro.constants import DEFAULT_MAX_PASSES, DEFAULT_MAX_STEPS, DEFAULT_PASSES


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = (env.get(key) or '').strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f'{key} must be an integer (got {raw!r})') from exc
    if value < 1:
        raise ValueError(f'{key} must be positive (got {value})')
    return value


@dataclass(frozen=True)
class EngineConfig:
    """Immutable configuration blob used to build an ExpansionEngine.

    Attributes:
        max_steps: Rewrite steps allowed in one pass before
            `ExpansionLimitExceeded` is raised.
        passes: Number of passes run by `ExpansionEngine.expand`.
        max_passes: Bound used by `ExpansionEngine.expand_until_stable`.
        logger: Optional logger; defaults to 'placemacro.engine'.
    """
    max_steps: int = DEFAULT_MAX_STEPS
    passes: int = DEFAULT_PASSES
    max_passes: int = DEFAULT_MAX_PASSES
    logger: Optional[logging.Logger] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, **overrides) -> 'EngineConfig':
        """Read PLACEMACRO_MAX_STEPS / PLACEMACRO_PASSES / PLACEMACRO_MAX_PASSES.

        Keyword overrides whose value is not None win over the environment.
        """
        env = os.environ if env is None else env
        cfg = cls(
            max_steps=_env_int(env, 'PLACEMACRO_MAX_STEPS', DEFAULT_MAX_STEPS),
            passes=_env_int(env, 'PLACEMACRO_PASSES', DEFAULT_PASSES),
            max_passes=_env_int(env, 'PLACEMACRO_MAX_PASSES', DEFAULT_MAX_PASSES),
        )
        return cfg.with_overrides(**overrides)

    def with_overrides(self, **overrides) -> 'EngineConfig':
        """Return a copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
