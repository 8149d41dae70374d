#!/usr/bin/env python3
"""
raster_preview.py
Render a single-band numeric raster (float, 16-bit or 32-bit integer) to a
gray + alpha PNG using its min/max display range.

Usage:
  python raster_preview.py INPUT [--out PATH] [--brute-force] [--overwrite] [--debug]

Range:
  MinSampleValue/MaxSampleValue tags win when both are present. Otherwise the
  observed min/max is used with --brute-force, and the natural range of the
  sample type without it. Samples equal to the GDAL_NODATA tag are transparent.

Output:
  PNG (RGBA). If --out is omitted, writes <stem>_preview.png next to INPUT.

Notes:
  Flags default from RASTER_COLOUR_* environment variables; the command line
  can only switch them on.
  Exit code 1 when no display mapper can be built for the input.
"""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

from raster_colour.core_types import Raster
from raster_colour.display_setup import select_display_mapper
from raster_colour.errors import ConfigurationError
from raster_colour.metadata import MappingTagLookup, read_range_tags
from raster_colour.settings import RenderFlags
from raster_colour.utils import (
    debug_log,
    error,
    log,
    print_banner,
    print_config_line,
    save_png_rgba,
    warn,
)


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments for raster previews.

    Returns:
      argparse.Namespace with:
        src: Path to the input image
        out: optional Path for the PNG
        brute_force: scan samples when min/max tags are absent
        overwrite: replace a legacy float colour model when no-data is tagged
        debug: bool for verbose range / mapper details
    """
    parser = argparse.ArgumentParser(
        prog="raster_preview",
        description="Render a single-band numeric raster to a gray + alpha PNG.",
    )
    parser.add_argument("src", type=Path, help="Input image")
    parser.add_argument("--out", type=Path, default=None, help="Output PNG (optional)")
    parser.add_argument(
        "--brute-force",
        action="store_true",
        help="Scan samples for min/max when the tags are missing.",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace a legacy float colour model when a no-data tag exists.",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose range details")
    return parser.parse_args(argv)


def _flags_from_args(args: argparse.Namespace) -> RenderFlags:
    env = RenderFlags.from_env()
    return replace(
        env,
        brute_force_min_max=env.brute_force_min_max or args.brute_force,
        overwrite_legacy_float_model=env.overwrite_legacy_float_model or args.overwrite,
        debug=env.debug or args.debug,
    )


def _load_raster(path: Path) -> Tuple[Raster, Optional[MappingTagLookup], str]:
    """Open path with Pillow; returns (raster, tag lookup or None, mode)."""
    with Image.open(path) as im:
        im.load()
        tags = getattr(im, "tag_v2", None)
        lookup = MappingTagLookup(dict(tags)) if tags is not None else None
        arr = np.array(im)
        mode = im.mode
    return Raster(arr), lookup, mode


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = parse_cli_args(argv)
    flags = _flags_from_args(args)

    src: Path = args.src
    if not src.exists():
        error(f"not found: {src}")
        return 1

    print_config_line(
        "run",
        [
            ("Brute force", flags.brute_force_min_max),
            ("Overwrite", flags.overwrite_legacy_float_model),
        ],
        debug=False,
    )

    t0 = time.perf_counter()
    try:
        raster, lookup, mode = _load_raster(src)
    except (OSError, UnidentifiedImageError, ConfigurationError) as exc:
        error(f"cannot read {src}: {exc}")
        return 1

    if flags.debug:
        debug_log(f"{src.name}: mode {mode}, {raster!r}")

    mapper = select_display_mapper(
        raster.num_bands,
        raster.sample_type,
        lookup,
        raster.sample_provider(),
        flags=flags,
    )
    if mapper is None:
        error(
            f"no display mapping for {src.name} "
            f"({raster.num_bands} band(s), {raster.sample_type.name})"
        )
        return 1

    tag_min, tag_max, _ = read_range_tags(lookup, raster.sample_type)
    if (tag_min is None or tag_max is None) and not flags.brute_force_min_max:
        warn(
            f"{src.name}: no min/max tags, using the full {raster.sample_type.name} range "
            "(try --brute-force)"
        )

    dst: Path = args.out if args.out is not None else src.with_name(f"{src.stem}_preview.png")
    save_png_rgba(dst, mapper.render_rgba(raster))

    print_banner(src.name)
    print_config_line(
        "range",
        [
            ("Min", mapper.min_value),
            ("Max", mapper.max_value),
            ("No-data", mapper.no_data_value),
            ("Alpha", mapper.has_alpha),
        ],
        debug=False,
    )
    log(f"wrote {dst} in {time.perf_counter() - t0:.3f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
