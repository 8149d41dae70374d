# raster_colour/utils.py
from __future__ import annotations

"""
Shared utilities for raster_colour.

Print-based logging, the one-line "[section] Key: value" summary used for
range and conversion details, and the RGBA PNG writer used by the preview CLI.
"""

import sys
from pathlib import Path
from typing import Any, Iterable, Tuple

import numpy as np
from PIL import Image

from .core_types import U8Image


# Summaries


def _format_value(value: Any) -> str:
    """'-' for None, on/off for bools, trimmed floats; huge or non-finite in %g."""
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "on" if value else "off"
    if isinstance(value, float):
        if not np.isfinite(value) or abs(value) >= 1e9:
            return f"{value:.6g}"
        return f"{value:.3f}".rstrip("0").rstrip(".")
    return str(value)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    One summary line, e.g.
      [range] Tier: tags  Min: 0  Max: 100  No-data: -1
    Prefixed with [debug] when debug=True.
    """
    body = "  ".join(f"{name}: {_format_value(value)}" for name, value in pairs)
    line = f"[{section}] {body}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    print(f"\n=== {title} ===", flush=True)


# Logging


def log(message: str) -> None:
    print(message, flush=True)


def debug_log(message: str) -> None:
    print(f"[debug] {message}", flush=True)


def warn(message: str) -> None:
    print(f"[warn] {message}", flush=True)


def error(message: str) -> None:
    """To stderr, so piped stdout stays clean."""
    print(f"[error] {message}", file=sys.stderr, flush=True)


# I/O


def save_png_rgba(path: Path, rgba: U8Image) -> None:
    """Save an (H, W, 4) uint8 array as a PNG file."""
    Image.fromarray(np.ascontiguousarray(rgba, dtype=np.uint8)).save(path)


__all__ = [
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
    "save_png_rgba",
]
