# raster_colour/display_mapper.py
from __future__ import annotations

"""
Min/max display mapper for wide single-band samples.

A sample v maps to
  gray  = clamp((v - min) / (max - min) * 255)   (0 for the no-data value)
  alpha = 0 when v < min, v > max or v == no-data, else 255
and packs to ARGB as (alpha << 24) | (gray << 16) | (gray << 8) | gray.

The clamp truncates toward zero and sends NaN to 0: only the "> 255" branch
can raise a value, everything failing ">= 0" lands on the floor.

Packed-int accessors are rejected: a single int cannot carry a float or
32-bit sample, so there is nothing to decode it back into.
"""

from typing import Any, Optional, Union

import numpy as np
from PIL import Image

from .colour_space import ColourSpace
from .constants import ALPHA_OPAQUE, ALPHA_TRANSPARENT, GRAY_MAX
from .core_types import (
    DisplayMapperConfig,
    PixelDescription,
    Raster,
    SampleArray,
    U8Image,
)
from .errors import ConfigurationError, UnsupportedOperationError
from .pseudo_colour_space import PseudoColourSpace
from .sample_types import SampleType, sample_type_info

_PACKED_PIXEL_MESSAGE = (
    "not supported by DisplayColourMapper: a packed int cannot hold the sample"
)


def _clamp_gray(t: float) -> int:
    if t >= 0.0:
        return GRAY_MAX if t > float(GRAY_MAX) else int(t)
    return 0


class DisplayColourMapper:
    """
    Maps raw samples of one band to gray + binary alpha.

    gray(), alpha() and packed_rgba() always apply the mapping, whatever
    has_alpha says. has_alpha only decides whether render_rgba() writes that
    alpha or a fully opaque plane.
    """

    def __init__(self, config: DisplayMapperConfig) -> None:
        if config.sample_type == SampleType.UNDEFINED:
            raise ConfigurationError(
                f"unsupported sample type: {config.sample_type!r}"
            )
        info = sample_type_info(config.sample_type)
        if config.range.is_degenerate:
            raise ConfigurationError(
                f"degenerate display range: min == max == {config.range.min}"
            )
        if config.range.is_inverted:
            raise ConfigurationError(
                f"inverted display range: {config.range.min} > {config.range.max}"
            )
        self._config = config
        self._info = info
        self._min = float(config.range.min)
        self._max = float(config.range.max)
        self._span = self._max - self._min
        nd = config.range.no_data
        self._no_data: Optional[float] = None if nd is None else float(nd)
        self._colour_space: ColourSpace = (
            config.colour_space
            if config.colour_space is not None
            else PseudoColourSpace(1)
        )

    def __repr__(self) -> str:
        return (
            f"DisplayColourMapper(min={self._min}, max={self._max}, "
            f"no_data={self._no_data}, type={self.sample_type.name})"
        )

    # Properties

    @property
    def config(self) -> DisplayMapperConfig:
        return self._config

    @property
    def min_value(self) -> float:
        return self._min

    @property
    def max_value(self) -> float:
        return self._max

    @property
    def no_data_value(self) -> Optional[float]:
        return self._no_data

    @property
    def has_alpha(self) -> bool:
        return self._config.has_alpha

    @property
    def sample_type(self) -> SampleType:
        return self._config.sample_type

    @property
    def colour_space(self) -> ColourSpace:
        return self._colour_space

    # Single sample

    def _is_no_data(self, value: float) -> bool:
        return self._no_data is not None and value == self._no_data

    def gray(self, value: float) -> int:
        v = float(value)
        if self._is_no_data(v):
            return 0
        with np.errstate(all="ignore"):
            t = (v - self._min) / self._span * GRAY_MAX
        return _clamp_gray(t)

    def alpha(self, value: float) -> int:
        v = float(value)
        if v < self._min or v > self._max or self._is_no_data(v):
            return ALPHA_TRANSPARENT
        return ALPHA_OPAQUE

    def packed_rgba(self, value: float) -> int:
        g = self.gray(value)
        a = self.alpha(value)
        return (a << 24) | (g << 16) | (g << 8) | g

    # Vectorised

    def gray_array(self, samples: np.ndarray) -> np.ndarray:
        """gray() over an array of any shape, as uint8."""
        v = np.asarray(samples, dtype=np.float64)
        with np.errstate(all="ignore"):
            t = (v - self._min) / self._span * GRAY_MAX
            g = np.where(t >= 0.0, t, 0.0)
            g = np.where(g > float(GRAY_MAX), float(GRAY_MAX), g)
        if self._no_data is not None:
            g = np.where(v == self._no_data, 0.0, g)
        return g.astype(np.uint8)

    def alpha_array(self, samples: np.ndarray) -> np.ndarray:
        """alpha() over an array of any shape, as uint8."""
        v = np.asarray(samples, dtype=np.float64)
        with np.errstate(invalid="ignore"):
            clear = (v < self._min) | (v > self._max)
            if self._no_data is not None:
                clear |= v == self._no_data
        return np.where(clear, ALPHA_TRANSPARENT, ALPHA_OPAQUE).astype(np.uint8)

    def _band(self, samples: Union[np.ndarray, Raster]) -> np.ndarray:
        arr = samples.data if isinstance(samples, Raster) else np.asarray(samples)
        if arr.ndim == 3:
            if arr.shape[2] != 1:
                raise ConfigurationError(
                    f"expected a single band, got {arr.shape[2]} bands"
                )
            arr = arr[..., 0]
        if arr.ndim != 2:
            raise ConfigurationError(f"expected (H,W) samples, got shape {arr.shape}")
        return arr

    def render_rgba(self, samples: Union[np.ndarray, Raster]) -> U8Image:
        """
        (H, W, 4) uint8 gray + alpha image of a single-band block.

        Without has_alpha the alpha channel is fully opaque.
        """
        band = self._band(samples)
        g = self.gray_array(band)
        out = np.empty(band.shape + (4,), dtype=np.uint8)
        out[..., 0] = g
        out[..., 1] = g
        out[..., 2] = g
        if self.has_alpha:
            out[..., 3] = self.alpha_array(band)
        else:
            out[..., 3] = ALPHA_OPAQUE
        return out

    def to_image(self, samples: Union[np.ndarray, Raster]) -> Image.Image:
        """RGBA Pillow image of render_rgba(samples)."""
        return Image.fromarray(self.render_rgba(samples))

    # Component accessors (sample arrays only)

    def _first_value(self, data: Any) -> float:
        if isinstance(data, (int, np.integer)) and not isinstance(data, bool):
            raise UnsupportedOperationError(_PACKED_PIXEL_MESSAGE)
        arr = np.asarray(data).ravel()
        if arr.size == 0:
            raise ConfigurationError("empty sample array")
        return float(arr.astype(self._info.dtype, copy=False)[0])

    def red_of(self, data: SampleArray) -> int:
        return self.gray(self._first_value(data))

    def green_of(self, data: SampleArray) -> int:
        return self.gray(self._first_value(data))

    def blue_of(self, data: SampleArray) -> int:
        return self.gray(self._first_value(data))

    def alpha_of(self, data: SampleArray) -> int:
        return self.alpha(self._first_value(data))

    def rgb_of(self, data: SampleArray) -> int:
        return self.packed_rgba(self._first_value(data))

    def components(self, pixel: Any) -> None:
        raise UnsupportedOperationError(_PACKED_PIXEL_MESSAGE)

    def data_elements(self, rgb: Any) -> None:
        raise UnsupportedOperationError(_PACKED_PIXEL_MESSAGE)

    # Compatibility

    def is_compatible_sample_model(self, desc: PixelDescription) -> bool:
        """One component of exactly the configured sample type."""
        return desc.num_components == 1 and desc.sample_type == self.sample_type

    def is_compatible_raster(self, raster: Raster) -> bool:
        """One band whose bit width and numeric type match the configured type."""
        if raster.num_bands != 1:
            return False
        if raster.sample_size != self._info.bits:
            return False
        return raster.sample_type == self.sample_type


__all__ = ["DisplayColourMapper"]
