# raster_colour/colour_convert.py
from __future__ import annotations

"""
Colour conversions on normalised float arrays (sRGB, D65).

Exports:
  rgb_to_linear(srgb)
  linear_to_rgb(linear)
  srgb_to_xyz(rgb)
  xyz_to_srgb(xyz)
  gray_to_xyz(gray)
  xyz_to_gray(xyz)
  rgb_to_ihs(rgb)
  ihs_to_rgb(ihs)

All functions accept any shape (..., k) and return float64 with the leading
shape preserved. Values are in [0, 1] unless noted.
"""

import numpy as np

from .constants import M_SRGB_TO_XYZ, M_XYZ_TO_SRGB, WHITE_D65

_M_SRGB_TO_XYZ_T = np.array(M_SRGB_TO_XYZ, dtype=np.float64).T.copy()
_M_XYZ_TO_SRGB_T = np.array(M_XYZ_TO_SRGB, dtype=np.float64).T.copy()
_WHITE = np.array(WHITE_D65, dtype=np.float64)

_TWO_PI = 2.0 * np.pi


# sRGB transfer


def rgb_to_linear(srgb: np.ndarray) -> np.ndarray:
    """
    Convert sRGB (non-linear 0..1) to linear RGB (0..1). Vectorised.
    Args:
      srgb: array[...] in 0..1 (float)
    Returns:
      float64 array of the same shape
    """
    srgb_f = np.asarray(srgb, dtype=np.float64)
    with np.errstate(invalid="ignore"):
        return np.where(
            srgb_f <= 0.04045, srgb_f / 12.92, ((srgb_f + 0.055) / 1.055) ** 2.4
        )


def linear_to_rgb(linear: np.ndarray) -> np.ndarray:
    """Linear RGB (0..1) to sRGB (0..1). Negative inputs clip to 0."""
    lin = np.clip(np.asarray(linear, dtype=np.float64), 0.0, None)
    return np.where(
        lin <= 0.0031308, lin * 12.92, 1.055 * np.power(lin, 1.0 / 2.4) - 0.055
    )


# sRGB <-> XYZ


def srgb_to_xyz(rgb: np.ndarray) -> np.ndarray:
    """sRGB[...,3] to CIE XYZ[...,3] (D65, Y of white = 1)."""
    return rgb_to_linear(rgb) @ _M_SRGB_TO_XYZ_T


def xyz_to_srgb(xyz: np.ndarray) -> np.ndarray:
    """CIE XYZ[...,3] to sRGB[...,3], clipped to the sRGB gamut."""
    linear = np.asarray(xyz, dtype=np.float64) @ _M_XYZ_TO_SRGB_T
    return np.clip(linear_to_rgb(linear), 0.0, 1.0)


# Linear gray <-> XYZ


def gray_to_xyz(gray: np.ndarray) -> np.ndarray:
    """Linear gray[...,1] to XYZ[...,3] on the D65 white axis."""
    g = np.asarray(gray, dtype=np.float64)[..., :1]
    return g * _WHITE


def xyz_to_gray(xyz: np.ndarray) -> np.ndarray:
    """XYZ[...,3] to linear gray[...,1] (luminance Y)."""
    return np.asarray(xyz, dtype=np.float64)[..., 1:2].copy()


# IHS (intensity, hue, saturation)


def rgb_to_ihs(rgb: np.ndarray) -> np.ndarray:
    """
    sRGB[...,3] to IHS[...,3].

    I = mean(R, G, B); H = angle on the colour circle scaled to [0, 1);
    S = 1 - min(R, G, B) / I. Achromatic pixels get H = 0, black gets S = 0.
    """
    arr = np.asarray(rgb, dtype=np.float64)
    r, g, b = arr[..., 0], arr[..., 1], arr[..., 2]
    intensity = (r + g + b) / 3.0

    lo = np.minimum(np.minimum(r, g), b)
    with np.errstate(invalid="ignore", divide="ignore"):
        saturation = np.where(intensity > 0.0, 1.0 - lo / intensity, 0.0)

        num = 0.5 * ((r - g) + (r - b))
        den = np.sqrt((r - g) ** 2 + (r - b) * (g - b))
        cos_h = np.where(den > 0.0, num / den, 1.0)
    theta = np.arccos(np.clip(cos_h, -1.0, 1.0))
    hue = np.where(b > g, _TWO_PI - theta, theta) / _TWO_PI
    hue = np.where(den > 0.0, hue % 1.0, 0.0)

    out = np.empty(arr.shape[:-1] + (3,), dtype=np.float64)
    out[..., 0] = intensity
    out[..., 1] = hue
    out[..., 2] = np.clip(saturation, 0.0, 1.0)
    return out


def ihs_to_rgb(ihs: np.ndarray) -> np.ndarray:
    """IHS[...,3] back to sRGB[...,3] by 120-degree sectors, clipped to [0, 1]."""
    arr = np.asarray(ihs, dtype=np.float64)
    intensity = arr[..., 0]
    hue = (arr[..., 1] % 1.0) * _TWO_PI
    saturation = arr[..., 2]

    sector = np.minimum((hue // (_TWO_PI / 3.0)).astype(np.int64), 2)
    h = hue - sector * (_TWO_PI / 3.0)

    x = intensity * (1.0 - saturation)
    with np.errstate(invalid="ignore", divide="ignore"):
        y = intensity * (1.0 + saturation * np.cos(h) / np.cos(np.pi / 3.0 - h))
    z = 3.0 * intensity - (x + y)

    out = np.empty(arr.shape[:-1] + (3,), dtype=np.float64)
    # sector 0: RG, 1: GB, 2: BR
    r = np.select([sector == 0, sector == 1], [y, x], z)
    g = np.select([sector == 0, sector == 1], [z, y], x)
    b = np.select([sector == 0, sector == 1], [x, z], y)
    out[..., 0] = r
    out[..., 1] = g
    out[..., 2] = b
    return np.clip(out, 0.0, 1.0)


__all__ = [
    "rgb_to_linear",
    "linear_to_rgb",
    "srgb_to_xyz",
    "xyz_to_srgb",
    "gray_to_xyz",
    "xyz_to_gray",
    "rgb_to_ihs",
    "ihs_to_rgb",
]
