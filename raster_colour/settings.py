# raster_colour/settings.py
from __future__ import annotations

"""
Process-wide rendering flags.

Exports:
- RenderFlags(overwrite_legacy_float_model=False, brute_force_min_max=False, debug=False)
- RenderFlags.from_env(environ=None) -> RenderFlags
- default_flags() -> RenderFlags

Notes:
- Both feature toggles are opt-in. The environment is read on every call, so
  callers that want a fixed configuration should build RenderFlags once and
  pass it explicitly.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .constants import (
    ENV_BRUTE_FORCE_MINMAX,
    ENV_DEBUG,
    ENV_OVERWRITE_COLOR_MODEL,
    TRUTHY_VALUES,
)


def _is_truthy(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in TRUTHY_VALUES


@dataclass(frozen=True)
class RenderFlags:
    overwrite_legacy_float_model: bool = False
    brute_force_min_max: bool = False
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> RenderFlags:
        env = os.environ if environ is None else environ
        return cls(
            overwrite_legacy_float_model=_is_truthy(env.get(ENV_OVERWRITE_COLOR_MODEL)),
            brute_force_min_max=_is_truthy(env.get(ENV_BRUTE_FORCE_MINMAX)),
            debug=_is_truthy(env.get(ENV_DEBUG)),
        )


def default_flags() -> RenderFlags:
    """Flags from the current process environment."""
    return RenderFlags.from_env()


__all__ = ["RenderFlags", "default_flags"]
