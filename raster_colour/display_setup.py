# raster_colour/display_setup.py
from __future__ import annotations

"""
Decide whether a freshly opened single-band image gets a min/max display mapper.

Exports:
- DISPLAYABLE_TYPES
- colour_model_name(model) -> str | None
- is_legacy_float_model(model) -> bool
- select_display_mapper(num_bands, sample_type, tags, sample_provider, *,
                        existing_model=None, flags=None) -> DisplayColourMapper | None

Rules:
- Only single-band FLOAT, DOUBLE, USHORT, SHORT and INT images qualify.
- No existing colour model: build one. Alpha is on iff a no-data tag decodes.
- Existing legacy float model: replaced only when the overwrite flag is set
  and a no-data tag decodes; its colour space is kept when it exposes one.
- Any other existing model is left alone.
- No usable range means None: the image keeps its prior rendering.
"""

from typing import Any, FrozenSet, Optional

from .colour_space import ColourSpace
from .constants import LEGACY_FLOAT_MODELS
from .core_types import DisplayMapperConfig, SampleProvider
from .display_mapper import DisplayColourMapper
from .metadata import TagLookup, read_range_tags
from .pseudo_colour_space import PseudoColourSpace
from .range_stats import determine_range
from .sample_types import SampleType
from .settings import RenderFlags, default_flags
from .utils import debug_log

DISPLAYABLE_TYPES: FrozenSet[SampleType] = frozenset(
    {
        SampleType.FLOAT,
        SampleType.DOUBLE,
        SampleType.USHORT,
        SampleType.SHORT,
        SampleType.INT,
    }
)


def colour_model_name(model: Any) -> Optional[str]:
    """A model's name: the string itself, its .name, or its class name."""
    if model is None:
        return None
    if isinstance(model, str):
        return model
    name = getattr(model, "name", None)
    if isinstance(name, str):
        return name
    return type(model).__name__


def is_legacy_float_model(model: Any) -> bool:
    return colour_model_name(model) in LEGACY_FLOAT_MODELS


def _model_colour_space(model: Any) -> ColourSpace:
    space = getattr(model, "colour_space", None)
    return space if isinstance(space, ColourSpace) else PseudoColourSpace(1)


def select_display_mapper(
    num_bands: int,
    sample_type: SampleType,
    tags: Optional[TagLookup],
    sample_provider: Optional[SampleProvider],
    *,
    existing_model: Any = None,
    flags: Optional[RenderFlags] = None,
) -> Optional[DisplayColourMapper]:
    flags = flags if flags is not None else default_flags()
    if num_bands != 1 or sample_type not in DISPLAYABLE_TYPES:
        if flags.debug:
            debug_log(
                f"display mapper skipped: {num_bands} band(s), {sample_type!r}"
            )
        return None

    if existing_model is not None:
        if not (flags.overwrite_legacy_float_model and is_legacy_float_model(existing_model)):
            if flags.debug:
                debug_log(
                    f"display mapper skipped: keeping {colour_model_name(existing_model)}"
                )
            return None

    tag_min, tag_max, no_data = read_range_tags(tags, sample_type)
    if existing_model is not None and no_data is None:
        if flags.debug:
            debug_log("display mapper skipped: legacy model without a no-data tag")
        return None

    spec = determine_range(
        sample_type,
        no_data,
        tag_min,
        tag_max,
        flags.brute_force_min_max,
        sample_provider,
        debug=flags.debug,
    )
    if spec is None:
        return None

    if existing_model is None:
        config = DisplayMapperConfig(
            range=spec,
            has_alpha=no_data is not None,
            sample_type=sample_type,
            colour_space=PseudoColourSpace(1),
        )
    else:
        config = DisplayMapperConfig(
            range=spec,
            has_alpha=True,
            sample_type=sample_type,
            colour_space=_model_colour_space(existing_model),
        )
    return DisplayColourMapper(config)


__all__ = [
    "DISPLAYABLE_TYPES",
    "colour_model_name",
    "is_legacy_float_model",
    "select_display_mapper",
]
