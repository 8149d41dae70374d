# raster_colour/__init__.py
"""
raster_colour package.

Purpose:
  Display mapping for wide single-band rasters and colour conversion between
  device and perceptual colour spaces. See raster_preview.py for the CLI.

Public API:
  determine_range        : min/max discovery (tags, brute-force scan, natural range).
  DisplayColourMapper    : raw sample -> gray + binary alpha, ARGB packing.
  select_display_mapper  : decide whether an opened image gets a mapper.
  PseudoColourSpace      : N-component placeholder colour space.
  ColourConversionSession: six-case conversion over a region.
  ConverterCache         : bounded, shared device converters.
  sample_types           : per-type behaviour table and signed/unsigned remap.
  metadata               : best-effort numeric tag lookup.
  settings               : process-wide flags (RenderFlags).
  utils                  : logging and small I/O helpers.

Quick start:
  from raster_colour import DisplayColourMapper, DisplayMapperConfig, RangeSpec, SampleType
  mapper = DisplayColourMapper(DisplayMapperConfig(RangeSpec(0, 100, -1), True, SampleType.FLOAT))
  mapper.gray(50)  # 127
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import colour_convert
from . import colour_space
from . import core_types
from . import errors
from . import metadata
from . import sample_types
from . import settings
from . import utils

from .colour_bridge import (  # noqa: E402,F401
    ColourConversionSession,
    ConversionCase,
    bridge_description,
    classify,
    convert,
)
from .colour_space import CIEXYZ, IHS, LINEAR_GRAY, SRGB, ColourSpace  # noqa: F401
from .converter_cache import DEFAULT_CACHE, ConverterCache, DeviceConverter  # noqa: F401
from .core_types import (  # noqa: F401
    ColourSpaceKind,
    DisplayMapperConfig,
    PixelDescription,
    RangeSpec,
    Raster,
    Rect,
)
from .display_mapper import DisplayColourMapper  # noqa: F401
from .display_setup import select_display_mapper  # noqa: F401
from .errors import (  # noqa: F401
    ConfigurationError,
    RasterColourError,
    UnsupportedOperationError,
)
from .metadata import MappingTagLookup, read_range_tags  # noqa: F401
from .pseudo_colour_space import PseudoColourSpace  # noqa: F401
from .range_stats import brute_force_range, determine_range, range_from_tags  # noqa: F401
from .sample_types import SampleType  # noqa: F401
from .settings import RenderFlags  # noqa: F401

__all__ = [
    "__version__",
    # namespaces
    "colour_convert",
    "colour_space",
    "core_types",
    "errors",
    "metadata",
    "sample_types",
    "settings",
    "utils",
    # range discovery
    "determine_range",
    "brute_force_range",
    "range_from_tags",
    "read_range_tags",
    "MappingTagLookup",
    # display mapping
    "DisplayColourMapper",
    "DisplayMapperConfig",
    "RangeSpec",
    "select_display_mapper",
    # colour spaces / conversion
    "ColourSpace",
    "PseudoColourSpace",
    "SRGB",
    "LINEAR_GRAY",
    "CIEXYZ",
    "IHS",
    "ColourConversionSession",
    "ConversionCase",
    "classify",
    "bridge_description",
    "convert",
    "ConverterCache",
    "DeviceConverter",
    "DEFAULT_CACHE",
    # core types
    "ColourSpaceKind",
    "PixelDescription",
    "Raster",
    "Rect",
    "SampleType",
    "RenderFlags",
    # errors
    "RasterColourError",
    "ConfigurationError",
    "UnsupportedOperationError",
]
