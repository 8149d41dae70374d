# raster_colour/constants.py
"""
Fixed codes and tunables used across the project.

- TIFF tag codes read during range discovery
- Colour-space type codes
- Converter cache sizing
- Environment variable names for the process-wide flags
- sRGB / XYZ matrices (D65)
"""
from __future__ import annotations

from typing import FrozenSet, Tuple

# ==================
# TIFF tag codes
# ==================
TIFFTAG_MINSAMPLEVALUE: int = 280
TIFFTAG_MAXSAMPLEVALUE: int = 281
# GDAL_NODATA, stored as ASCII
TIFFTAG_GDAL_NODATA: int = 42113

# Colour models that may be replaced by a min/max display mapper when the
# overwrite flag is on.
LEGACY_FLOAT_MODELS: FrozenSet[str] = frozenset(
    {"FloatDoubleColorModel", "org.eclipse.imagen.FloatDoubleColorModel"}
)

# ========================
# Colour-space type codes
# ========================
SPACE_TYPE_XYZ: int = 0
SPACE_TYPE_RGB: int = 5
SPACE_TYPE_GRAY: int = 6
SPACE_TYPE_HSV: int = 7
# Pseudo spaces with n > 1 components report n + offset.
PSEUDO_TYPE_OFFSET: int = 10

# ======================
# Display mapper output
# ======================
GRAY_MAX: int = 255
ALPHA_OPAQUE: int = 255
ALPHA_TRANSPARENT: int = 0

# ================
# Converter cache
# ================
CONVERTER_CACHE_MAX_ENTRIES: int = 64

# =====================
# Environment switches
# =====================
ENV_OVERWRITE_COLOR_MODEL: str = "RASTER_COLOUR_OVERWRITE_COLOR_MODEL"
ENV_BRUTE_FORCE_MINMAX: str = "RASTER_COLOUR_BRUTE_FORCE_MINMAX"
ENV_DEBUG: str = "RASTER_COLOUR_DEBUG"
TRUTHY_VALUES: FrozenSet[str] = frozenset({"1", "true", "yes", "on"})

# ==================
# sRGB / XYZ (D65)
# ==================
M_SRGB_TO_XYZ: Tuple[Tuple[float, float, float], ...] = (
    (0.4124564, 0.3575761, 0.1804375),
    (0.2126729, 0.7151522, 0.0721750),
    (0.0193339, 0.1191920, 0.9503041),
)
M_XYZ_TO_SRGB: Tuple[Tuple[float, float, float], ...] = (
    (3.2404542, -1.5371385, -0.4985314),
    (-0.9692660, 1.8760108, 0.0415560),
    (0.0556434, -0.2040259, 1.0572252),
)
WHITE_D65: Tuple[float, float, float] = (0.95047, 1.00000, 1.08883)
