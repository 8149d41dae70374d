# raster_colour/pseudo_colour_space.py
from __future__ import annotations

"""
Placeholder N-component colour space.

Used where a colour space object is required but no colorimetric meaning is,
e.g. the single-band display mapper. All four conversions copy the first
min(3, n) components positionally into a zeroed destination.
"""

from typing import List, Sequence

import numpy as np

from .constants import PSEUDO_TYPE_OFFSET, SPACE_TYPE_GRAY
from .colour_space import ColourSpace
from .errors import ConfigurationError


def pseudo_type_code(num_components: int) -> int:
    """GRAY for one component, otherwise n offset past the standard codes."""
    if num_components < 1:
        raise ConfigurationError("num_components < 1")
    if num_components == 1:
        return SPACE_TYPE_GRAY
    return num_components + PSEUDO_TYPE_OFFSET


class PseudoColourSpace(ColourSpace):
    """Identity-like device space with num_components components."""

    def __init__(self, num_components: int) -> None:
        super().__init__(
            f"pseudo-{num_components}", pseudo_type_code(num_components), num_components
        )

    def _copy_prefix(self, values: np.ndarray, width: int) -> np.ndarray:
        src = np.asarray(values, dtype=np.float64)
        out = np.zeros(src.shape[:-1] + (width,), dtype=np.float64)
        k = min(3, self.num_components)
        out[..., :k] = src[..., :k]
        return out

    def _require(self, values: np.ndarray, needed: int, what: str) -> np.ndarray:
        arr = np.asarray(values, dtype=np.float64)
        if arr.ndim == 0 or arr.shape[-1] < needed:
            raise ValueError(f"{what} has fewer than {needed} components")
        return arr

    # Vectorised

    def to_rgb_array(self, values: np.ndarray) -> np.ndarray:
        arr = self._require(values, self.num_components, "colour value")
        return self._copy_prefix(arr, 3)

    def from_rgb_array(self, rgb: np.ndarray) -> np.ndarray:
        arr = self._require(rgb, 3, "rgb value")
        return self._copy_prefix(arr, self.num_components)

    def to_xyz_array(self, values: np.ndarray) -> np.ndarray:
        arr = self._require(values, self.num_components, "colour value")
        return self._copy_prefix(arr, 3)

    def from_xyz_array(self, xyz: np.ndarray) -> np.ndarray:
        arr = self._require(xyz, 3, "xyz value")
        return self._copy_prefix(arr, self.num_components)

    # Per pixel

    def to_rgb(self, values: Sequence[float]) -> List[float]:
        return self.to_rgb_array(np.asarray(values, dtype=np.float64).ravel()).tolist()

    def from_rgb(self, rgb: Sequence[float]) -> List[float]:
        return self.from_rgb_array(np.asarray(rgb, dtype=np.float64).ravel()).tolist()

    def to_xyz(self, values: Sequence[float]) -> List[float]:
        return self.to_xyz_array(np.asarray(values, dtype=np.float64).ravel()).tolist()

    def from_xyz(self, xyz: Sequence[float]) -> List[float]:
        return self.from_xyz_array(np.asarray(xyz, dtype=np.float64).ravel()).tolist()


__all__ = ["pseudo_type_code", "PseudoColourSpace"]
