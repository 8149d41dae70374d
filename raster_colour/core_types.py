# raster_colour/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from .errors import ConfigurationError
from .sample_types import (
    SampleType,
    SampleTypeInfo,
    sample_type_for_dtype,
    sample_type_info,
)

if TYPE_CHECKING:  # pragma: no cover - for type hints only
    from .colour_space import ColourSpace

# Basic aliases

SampleArray = NDArray[np.generic]  # (H, W, bands) in the native dtype
U8Image = NDArray[np.uint8]  # (H, W, 4) RGBA
SampleProvider = Callable[[], np.ndarray]  # full raster as a flat array


class ColourSpaceKind(enum.Enum):
    """Device spaces convert off the shelf; perceptual ones need custom code."""

    DEVICE = "device"
    PERCEPTUAL = "perceptual"


# Value objects


@dataclass(frozen=True)
class Rect:
    """Axis-aligned pixel rectangle."""

    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return max(0, self.width) * max(0, self.height)

    @property
    def x_max(self) -> int:
        return self.x + self.width

    @property
    def y_max(self) -> int:
        return self.y + self.height

    def contains(self, other: Rect) -> bool:
        return (
            other.x >= self.x
            and other.y >= self.y
            and other.x_max <= self.x_max
            and other.y_max <= self.y_max
        )


@dataclass(frozen=True)
class RangeSpec:
    """Display range with an optional no-data sentinel."""

    min: float
    max: float
    no_data: Optional[float] = None

    @property
    def is_degenerate(self) -> bool:
        return self.min == self.max

    @property
    def is_inverted(self) -> bool:
        return self.min > self.max


@dataclass(frozen=True)
class DisplayMapperConfig:
    """
    Everything a DisplayColourMapper needs.

    colour_space=None means a one-component PseudoColourSpace.
    """

    range: RangeSpec
    has_alpha: bool
    sample_type: SampleType
    colour_space: Optional["ColourSpace"] = None


@dataclass(frozen=True)
class PixelDescription:
    """One side of a colour conversion: sizes, sample type and colour space."""

    component_sizes: Tuple[int, ...]
    sample_type: SampleType
    colour_space: "ColourSpace"

    def __post_init__(self) -> None:
        sizes = tuple(int(s) for s in self.component_sizes)
        object.__setattr__(self, "component_sizes", sizes)
        info = sample_type_info(self.sample_type)
        if not sizes:
            raise ConfigurationError("component_sizes must not be empty")
        if len(sizes) != self.colour_space.num_components:
            raise ConfigurationError(
                f"{len(sizes)} component sizes for a "
                f"{self.colour_space.num_components}-component colour space"
            )
        if any(s < 1 or s > info.bits for s in sizes):
            raise ConfigurationError(
                f"component sizes {sizes} do not fit {info.sample_type.name}"
            )

    @classmethod
    def for_raster(
        cls,
        raster: Raster,
        colour_space: "ColourSpace",
        component_sizes: Optional[Sequence[int]] = None,
    ) -> PixelDescription:
        """Describe raster in colour_space; sizes default to the full sample width."""
        sample_type = raster.sample_type
        if component_sizes is None:
            bits = sample_type_info(sample_type).bits
            component_sizes = (bits,) * colour_space.num_components
        return cls(tuple(component_sizes), sample_type, colour_space)

    @property
    def info(self) -> SampleTypeInfo:
        return sample_type_info(self.sample_type)

    @property
    def num_components(self) -> int:
        return len(self.component_sizes)

    @property
    def colour_space_kind(self) -> ColourSpaceKind:
        return self.colour_space.kind

    @property
    def is_device_rgb(self) -> bool:
        return (
            self.colour_space.kind is ColourSpaceKind.DEVICE
            and self.colour_space.is_device_rgb
        )

    @property
    def is_float(self) -> bool:
        return self.info.is_float

    @property
    def norm_min(self) -> float:
        return self.info.norm_min

    @property
    def norm_range(self) -> float:
        return self.info.norm_range


class Raster:
    """
    Block of samples, (H, W, bands) in the native dtype, placed at (x, y).

    Children share memory with their parent, so writes through a child are
    visible in the parent.
    """

    def __init__(self, data: np.ndarray, x: int = 0, y: int = 0) -> None:
        arr = np.asarray(data)
        if arr.ndim == 2:
            arr = arr[..., None]
        if arr.ndim != 3:
            raise ConfigurationError(f"expected (H,W) or (H,W,bands), got {arr.shape}")
        if not arr.dtype.isnative:
            # e.g. Pillow's I;16B gives >u2
            arr = arr.astype(arr.dtype.newbyteorder("="))
        sample_type_for_dtype(arr.dtype)
        self.data = arr
        self.x = int(x)
        self.y = int(y)

    def __repr__(self) -> str:
        return (
            f"Raster({self.width}x{self.height}x{self.num_bands} "
            f"{self.data.dtype} at ({self.x},{self.y}))"
        )

    @classmethod
    def zeros(
        cls,
        width: int,
        height: int,
        bands: int,
        sample_type: SampleType,
        x: int = 0,
        y: int = 0,
    ) -> Raster:
        dtype = sample_type_info(sample_type).dtype
        return cls(np.zeros((height, width, bands), dtype=dtype), x, y)

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def num_bands(self) -> int:
        return int(self.data.shape[2])

    @property
    def sample_type(self) -> SampleType:
        return sample_type_for_dtype(self.data.dtype)

    @property
    def sample_size(self) -> int:
        """Bits per sample, identical for every band."""
        return sample_type_info(self.sample_type).bits

    @property
    def bounds(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    def _require(self, rect: Rect) -> None:
        if not self.bounds.contains(rect):
            raise ConfigurationError(f"{rect} is outside raster bounds {self.bounds}")

    def window(self, rect: Rect) -> np.ndarray:
        """View of the samples covered by rect, (h, w, bands)."""
        self._require(rect)
        top = rect.y - self.y
        left = rect.x - self.x
        return self.data[top : top + rect.height, left : left + rect.width, :]

    def child(self, rect: Rect) -> Raster:
        """Sub-raster sharing memory, with its origin at rect's origin."""
        return Raster(self.window(rect), rect.x, rect.y)

    def get_samples(self, x: int, y: int, w: int, h: int, band: int = 0) -> np.ndarray:
        """Flat copy of one band over the given rectangle."""
        if not 0 <= band < self.num_bands:
            raise ConfigurationError(f"band {band} out of range")
        return self.window(Rect(x, y, w, h))[..., band].ravel().copy()

    def get_pixel(self, x: int, y: int) -> np.ndarray:
        return self.window(Rect(x, y, 1, 1))[0, 0, :].copy()

    def set_pixel(self, x: int, y: int, values: Sequence[float]) -> None:
        self.window(Rect(x, y, 1, 1))[0, 0, :] = values

    def sample_provider(self, band: int = 0) -> SampleProvider:
        """Callable returning every sample of band as a flat array."""
        return lambda: self.get_samples(self.x, self.y, self.width, self.height, band)


def as_raster(samples: np.ndarray | Raster) -> Raster:
    """Wrap a bare (H,W) or (H,W,bands) array; rasters pass through."""
    return samples if isinstance(samples, Raster) else Raster(samples)


def describe(
    raster: Raster,
    colour_space: "ColourSpace",
    component_sizes: Optional[Sequence[int]] = None,
) -> PixelDescription:
    return PixelDescription.for_raster(raster, colour_space, component_sizes)


__all__ = [
    # aliases / types
    "SampleArray",
    "U8Image",
    "SampleProvider",
    "ColourSpaceKind",
    # value objects
    "Rect",
    "RangeSpec",
    "DisplayMapperConfig",
    "PixelDescription",
    "Raster",
    # helpers
    "as_raster",
    "describe",
]
