# raster_colour/colour_space.py
from __future__ import annotations

"""
Colour spaces used on either side of a conversion.

Device spaces (SRGB, LINEAR_GRAY, CIEXYZ) are converted through CIE XYZ by the
cached DeviceConverter or the per-pixel float path. Perceptual spaces
(IHSColourSpace) bring their own raster-level conversion to and from device
RGB and are bridged through it.

Identity is object identity: converters are cached per (source, destination)
pair of instances.
"""

from typing import List, Sequence

import numpy as np

from .colour_convert import (
    gray_to_xyz,
    ihs_to_rgb,
    linear_to_rgb,
    rgb_to_ihs,
    srgb_to_xyz,
    xyz_to_gray,
    xyz_to_srgb,
)
from .constants import SPACE_TYPE_GRAY, SPACE_TYPE_HSV, SPACE_TYPE_RGB, SPACE_TYPE_XYZ
from .core_types import ColourSpaceKind
from .errors import ConfigurationError


# Component scaling


def normalise_components(block: np.ndarray, sizes: Sequence[int]) -> np.ndarray:
    """
    Integer block[..., k] to floats in [0, 1], dividing each component by
    2**size - 1. Float blocks are taken as already normalised.
    """
    arr = np.asarray(block)[..., : len(sizes)]
    if arr.dtype.kind == "f":
        return arr.astype(np.float64)
    scale = np.array([(1 << int(s)) - 1 for s in sizes], dtype=np.float64)
    return arr.astype(np.float64) / scale


def scale_components(
    values: np.ndarray, sizes: Sequence[int], dtype: np.dtype
) -> np.ndarray:
    """Inverse of normalise_components: clip, scale by 2**size - 1 and round."""
    dtype = np.dtype(dtype)
    vals = np.asarray(values, dtype=np.float64)[..., : len(sizes)]
    if dtype.kind == "f":
        return vals.astype(dtype)
    scale = np.array([(1 << int(s)) - 1 for s in sizes], dtype=np.float64)
    return np.rint(np.clip(vals, 0.0, 1.0) * scale).astype(dtype)


# Base


class ColourSpace:
    """
    Base colour space.

    Vectorised *_array methods work on normalised float arrays (..., k).
    Per-pixel methods take a sequence and return a list; they reject inputs
    shorter than the component count they need.
    """

    kind: ColourSpaceKind = ColourSpaceKind.DEVICE
    is_device_rgb: bool = False

    def __init__(self, name: str, type_code: int, num_components: int) -> None:
        if num_components < 1:
            raise ConfigurationError("num_components < 1")
        self.name = name
        self.type_code = int(type_code)
        self.num_components = int(num_components)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, n={self.num_components})"

    # Vectorised

    def to_xyz_array(self, values: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def from_xyz_array(self, xyz: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def to_rgb_array(self, values: np.ndarray) -> np.ndarray:
        return xyz_to_srgb(self.to_xyz_array(values))

    def from_rgb_array(self, rgb: np.ndarray) -> np.ndarray:
        return self.from_xyz_array(srgb_to_xyz(rgb))

    # Per pixel

    @staticmethod
    def _row(values: Sequence[float], needed: int) -> np.ndarray:
        arr = np.asarray(values, dtype=np.float64).ravel()
        if arr.size < needed:
            raise ValueError(f"expected at least {needed} components, got {arr.size}")
        return arr[:needed][None, :]

    def to_rgb(self, values: Sequence[float]) -> List[float]:
        return self.to_rgb_array(self._row(values, self.num_components))[0].tolist()

    def from_rgb(self, rgb: Sequence[float]) -> List[float]:
        return self.from_rgb_array(self._row(rgb, 3))[0].tolist()

    def to_xyz(self, values: Sequence[float]) -> List[float]:
        return self.to_xyz_array(self._row(values, self.num_components))[0].tolist()

    def from_xyz(self, xyz: Sequence[float]) -> List[float]:
        return self.from_xyz_array(self._row(xyz, 3))[0].tolist()


# Device spaces


class SRGBColourSpace(ColourSpace):
    """The device RGB space (sRGB, D65)."""

    is_device_rgb = True

    def __init__(self) -> None:
        super().__init__("sRGB", SPACE_TYPE_RGB, 3)

    def to_xyz_array(self, values: np.ndarray) -> np.ndarray:
        return srgb_to_xyz(values)

    def from_xyz_array(self, xyz: np.ndarray) -> np.ndarray:
        return xyz_to_srgb(xyz)

    def to_rgb_array(self, values: np.ndarray) -> np.ndarray:
        return np.clip(np.asarray(values, dtype=np.float64), 0.0, 1.0)

    def from_rgb_array(self, rgb: np.ndarray) -> np.ndarray:
        return np.asarray(rgb, dtype=np.float64).copy()


class LinearGrayColourSpace(ColourSpace):
    """Linear single-component gray on the D65 white axis."""

    def __init__(self) -> None:
        super().__init__("linear gray", SPACE_TYPE_GRAY, 1)

    def to_xyz_array(self, values: np.ndarray) -> np.ndarray:
        return gray_to_xyz(values)

    def from_xyz_array(self, xyz: np.ndarray) -> np.ndarray:
        return xyz_to_gray(xyz)

    def to_rgb_array(self, values: np.ndarray) -> np.ndarray:
        g = linear_to_rgb(np.asarray(values, dtype=np.float64)[..., :1])
        return np.clip(np.repeat(g, 3, axis=-1), 0.0, 1.0)

    def from_rgb_array(self, rgb: np.ndarray) -> np.ndarray:
        return xyz_to_gray(srgb_to_xyz(rgb))


class XYZColourSpace(ColourSpace):
    """CIE XYZ itself; conversions to and from XYZ are copies."""

    def __init__(self) -> None:
        super().__init__("CIE XYZ", SPACE_TYPE_XYZ, 3)

    def to_xyz_array(self, values: np.ndarray) -> np.ndarray:
        return np.asarray(values, dtype=np.float64)[..., :3].copy()

    def from_xyz_array(self, xyz: np.ndarray) -> np.ndarray:
        return np.asarray(xyz, dtype=np.float64)[..., :3].copy()


# Perceptual spaces


class PerceptualColourSpace(ColourSpace):
    """
    Colour space with its own conversion to and from device RGB.

    The raster-level methods take unsigned integer blocks (signed data must be
    remapped by the caller first) or normalised float blocks, and return a
    block of dst_dtype in the same representation.
    """

    kind = ColourSpaceKind.PERCEPTUAL

    def to_rgb_raster(
        self,
        src: np.ndarray,
        src_sizes: Sequence[int],
        dst_sizes: Sequence[int],
        dst_dtype: np.dtype,
    ) -> np.ndarray:
        rgb = self.to_rgb_array(normalise_components(src, src_sizes))
        return scale_components(rgb, dst_sizes, dst_dtype)

    def from_rgb_raster(
        self,
        src: np.ndarray,
        src_sizes: Sequence[int],
        dst_sizes: Sequence[int],
        dst_dtype: np.dtype,
    ) -> np.ndarray:
        values = self.from_rgb_array(normalise_components(src, src_sizes))
        return scale_components(values, dst_sizes, dst_dtype)

    def to_xyz_array(self, values: np.ndarray) -> np.ndarray:
        return srgb_to_xyz(self.to_rgb_array(values))

    def from_xyz_array(self, xyz: np.ndarray) -> np.ndarray:
        return self.from_rgb_array(xyz_to_srgb(xyz))


class IHSColourSpace(PerceptualColourSpace):
    """Intensity, hue, saturation over sRGB."""

    def __init__(self) -> None:
        super().__init__("IHS", SPACE_TYPE_HSV, 3)

    def to_rgb_array(self, values: np.ndarray) -> np.ndarray:
        return ihs_to_rgb(values)

    def from_rgb_array(self, rgb: np.ndarray) -> np.ndarray:
        return rgb_to_ihs(np.clip(np.asarray(rgb, dtype=np.float64), 0.0, 1.0))


SRGB = SRGBColourSpace()
LINEAR_GRAY = LinearGrayColourSpace()
CIEXYZ = XYZColourSpace()
IHS = IHSColourSpace()


__all__ = [
    "normalise_components",
    "scale_components",
    "ColourSpace",
    "SRGBColourSpace",
    "LinearGrayColourSpace",
    "XYZColourSpace",
    "PerceptualColourSpace",
    "IHSColourSpace",
    "SRGB",
    "LINEAR_GRAY",
    "CIEXYZ",
    "IHS",
]
