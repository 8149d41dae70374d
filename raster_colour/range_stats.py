# raster_colour/range_stats.py
from __future__ import annotations

"""
Display range discovery for single-band numeric rasters.

Exports:
- determine_range(sample_type, no_data, tag_min, tag_max, brute_force_enabled,
                  sample_provider, *, debug=False) -> RangeSpec | None
- brute_force_range(samples, sample_type, no_data) -> (min, max) | None
- range_from_tags(lookup, sample_type, sample_provider, flags=None) -> RangeSpec | None

Tiers, first match wins:
  1. both min and max tags present -> taken verbatim
  2. brute force enabled          -> observed min/max excluding no-data and NaN
  3. otherwise                     -> natural range of the sample type

An empty scan, an undefined sample type, or a resolved min >= max gives
None: the caller keeps whatever rendering it already had. Tags for unsigned
images often come back inverted (65535 reads as SHORT -1).
"""

from typing import Optional

import numpy as np

from .core_types import RangeSpec, SampleProvider
from .metadata import TagLookup, read_range_tags
from .sample_types import SAMPLE_TYPES, MinMax, SampleType, natural_range
from .settings import RenderFlags, default_flags
from .utils import print_config_line


def brute_force_range(
    samples: np.ndarray, sample_type: SampleType, no_data: Optional[float]
) -> Optional[MinMax]:
    """
    Observed (min, max) over samples in their native type.

    Samples exactly equal to no_data are skipped, as are NaNs. Returns None
    when nothing is left or the type has no scan routine.
    """
    info = SAMPLE_TYPES.get(sample_type)
    if info is None:
        return None
    return info.scan(samples, no_data)


def _log_range(
    tier: str, sample_type: SampleType, spec: Optional[RangeSpec], debug: bool
) -> None:
    if not debug:
        return
    print_config_line(
        "range",
        [
            ("Tier", tier),
            ("Type", getattr(sample_type, "name", str(sample_type))),
            ("Min", None if spec is None else spec.min),
            ("Max", None if spec is None else spec.max),
            ("No-data", None if spec is None else spec.no_data),
        ],
        debug=True,
    )


def determine_range(
    sample_type: SampleType,
    no_data: Optional[float],
    tag_min: Optional[float],
    tag_max: Optional[float],
    brute_force_enabled: bool,
    sample_provider: Optional[SampleProvider],
    *,
    debug: bool = False,
) -> Optional[RangeSpec]:
    """Resolve the display range; None means no normalisation is possible."""
    if tag_min is not None and tag_max is not None:
        tier = "tags"
        bounds: Optional[MinMax] = (float(tag_min), float(tag_max))
    elif brute_force_enabled and sample_provider is not None:
        tier = "scan"
        bounds = brute_force_range(sample_provider(), sample_type, no_data)
    else:
        tier = "natural"
        bounds = natural_range(sample_type)

    if bounds is None:
        _log_range(f"{tier} (empty)", sample_type, None, debug)
        return None

    spec = RangeSpec(bounds[0], bounds[1], no_data)
    if spec.is_degenerate:
        _log_range(f"{tier} (degenerate)", sample_type, spec, debug)
        return None
    if spec.is_inverted:
        _log_range(f"{tier} (inverted)", sample_type, spec, debug)
        return None
    _log_range(tier, sample_type, spec, debug)
    return spec


def range_from_tags(
    lookup: Optional[TagLookup],
    sample_type: SampleType,
    sample_provider: Optional[SampleProvider],
    flags: Optional[RenderFlags] = None,
) -> Optional[RangeSpec]:
    """Read min/max/no-data tags from lookup and resolve the range."""
    flags = flags if flags is not None else default_flags()
    tag_min, tag_max, no_data = read_range_tags(lookup, sample_type)
    return determine_range(
        sample_type,
        no_data,
        tag_min,
        tag_max,
        flags.brute_force_min_max,
        sample_provider,
        debug=flags.debug,
    )


__all__ = ["brute_force_range", "determine_range", "range_from_tags"]
