# raster_colour/sample_types.py
from __future__ import annotations

"""
Numeric sample kinds and the single behaviour table keyed by them.

Every per-type decision (natural range, signed/unsigned remap, tag narrowing,
brute-force scan) is looked up in SAMPLE_TYPES instead of branching at each
call site.

Exports:
  SampleType, SampleTypeInfo, SAMPLE_TYPES
  sample_type_info(t) -> SampleTypeInfo        (ConfigurationError for UNDEFINED)
  sample_type_for_dtype(dtype) -> SampleType
  natural_range(t) -> (min, max) | None
  to_unsigned(samples, t), to_signed(samples, t)
  wider(a, b) -> SampleType
"""

import enum
import math
import sys
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Tuple

import numpy as np

from .errors import ConfigurationError

MinMax = Tuple[float, float]
ScanFn = Callable[[np.ndarray, Optional[float]], Optional[MinMax]]


class SampleType(enum.IntEnum):
    """Sample kinds, valued by width ordinal (wider types compare greater)."""

    BYTE = 0
    USHORT = 1
    SHORT = 2
    INT = 3
    FLOAT = 4
    DOUBLE = 5
    UNDEFINED = 32


@dataclass(frozen=True)
class SampleTypeInfo:
    """Behaviour of one sample type. See module docstring."""

    sample_type: SampleType
    dtype: np.dtype
    unsigned_dtype: np.dtype
    bits: int
    signed: bool
    is_float: bool
    natural_min: float
    natural_max: float
    norm_min: float  # per-pixel float path: (v - norm_min) / norm_range
    norm_range: float
    unsigned_offset: int  # added by to_unsigned, removed by to_signed
    narrow: Callable[[float], float]
    scan: ScanFn

    @property
    def natural_range(self) -> MinMax:
        return (self.natural_min, self.natural_max)


# Tag narrowing

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


def _saturate_int32(value: float) -> int:
    """Truncate toward zero, saturating at the int32 limits. NaN becomes 0."""
    if math.isnan(value):
        return 0
    if value >= _INT32_MAX:
        return _INT32_MAX
    if value <= _INT32_MIN:
        return _INT32_MIN
    return int(value)


def _integral_narrower(bits: int, signed: bool) -> Callable[[float], float]:
    mask = (1 << bits) - 1
    half = 1 << (bits - 1)

    def narrow(value: float) -> float:
        wrapped = _saturate_int32(value) & mask
        if signed and wrapped >= half:
            wrapped -= 1 << bits
        return float(wrapped)

    return narrow


def _narrow_float32(value: float) -> float:
    with np.errstate(over="ignore"):
        return float(np.float32(value))


def _narrow_identity(value: float) -> float:
    return float(value)


# Brute-force scan


def _scanner(dtype: np.dtype) -> ScanFn:
    """
    Build the min/max scan for one native dtype.

    Samples are first narrowed into the native dtype, so the sentinel is
    compared against decoded values and unsigned types compare unsigned.
    NaN samples never count as observed values.
    """

    def scan(samples: np.ndarray, no_data: Optional[float]) -> Optional[MinMax]:
        values = np.asarray(samples).ravel().astype(dtype, copy=False)
        if values.size == 0:
            return None
        keep = np.ones(values.shape, dtype=bool)
        if values.dtype.kind == "f":
            keep &= ~np.isnan(values)
        if no_data is not None:
            keep &= values.astype(np.float64) != float(no_data)
        if not np.any(keep):
            return None
        kept = values[keep]
        return float(kept.min()), float(kept.max())

    return scan


# Table

_FLT_MAX = float(np.finfo(np.float32).max)
_DBL_MAX = sys.float_info.max


def _integral(
    sample_type: SampleType, dtype: str, unsigned_dtype: str, bits: int, signed: bool
) -> SampleTypeInfo:
    lo = -(1 << (bits - 1)) if signed else 0
    hi = (1 << (bits - 1)) - 1 if signed else (1 << bits) - 1
    return SampleTypeInfo(
        sample_type=sample_type,
        dtype=np.dtype(dtype),
        unsigned_dtype=np.dtype(unsigned_dtype),
        bits=bits,
        signed=signed,
        is_float=False,
        natural_min=float(lo),
        natural_max=float(hi),
        norm_min=float(lo),
        norm_range=float(hi - lo),
        unsigned_offset=-lo,
        narrow=_integral_narrower(bits, signed),
        scan=_scanner(np.dtype(dtype)),
    )


def _floating(
    sample_type: SampleType, dtype: str, bits: int, limit: float, narrow
) -> SampleTypeInfo:
    return SampleTypeInfo(
        sample_type=sample_type,
        dtype=np.dtype(dtype),
        unsigned_dtype=np.dtype(dtype),
        bits=bits,
        signed=True,
        is_float=True,
        natural_min=-limit,
        natural_max=limit,
        norm_min=0.0,
        norm_range=1.0,
        unsigned_offset=0,
        narrow=narrow,
        scan=_scanner(np.dtype(dtype)),
    )


def _build_table() -> Mapping[SampleType, SampleTypeInfo]:
    table = {
        SampleType.BYTE: _integral(SampleType.BYTE, "uint8", "uint8", 8, False),
        SampleType.USHORT: _integral(SampleType.USHORT, "uint16", "uint16", 16, False),
        SampleType.SHORT: _integral(SampleType.SHORT, "int16", "uint16", 16, True),
        SampleType.INT: _integral(SampleType.INT, "int32", "uint32", 32, True),
        SampleType.FLOAT: _floating(
            SampleType.FLOAT, "float32", 32, _FLT_MAX, _narrow_float32
        ),
        SampleType.DOUBLE: _floating(
            SampleType.DOUBLE, "float64", 64, _DBL_MAX, _narrow_identity
        ),
    }
    return MappingProxyType(table)


SAMPLE_TYPES: Mapping[SampleType, SampleTypeInfo] = _build_table()

_BY_DTYPE = {info.dtype: t for t, info in SAMPLE_TYPES.items()}


# Lookups


def sample_type_info(sample_type: SampleType) -> SampleTypeInfo:
    """Table entry for sample_type. UNDEFINED has no behaviour."""
    try:
        return SAMPLE_TYPES[SampleType(sample_type)]
    except (KeyError, ValueError):
        raise ConfigurationError(
            f"unsupported sample type: {sample_type!r}"
        ) from None


def sample_type_for_dtype(dtype: np.dtype | type | str) -> SampleType:
    """Map a numpy dtype onto its SampleType."""
    key = np.dtype(dtype)
    if key not in _BY_DTYPE:
        raise ConfigurationError(f"no sample type for dtype {key}")
    return _BY_DTYPE[key]


def natural_range(sample_type: SampleType) -> Optional[MinMax]:
    """Exact representable (min, max) of the type, or None when it has none."""
    info = SAMPLE_TYPES.get(sample_type)
    return None if info is None else info.natural_range


def wider(a: SampleType, b: SampleType) -> SampleType:
    """The wider of two sample types by ordinal."""
    return a if int(a) > int(b) else b


# Signed / unsigned remap


def to_unsigned(samples: np.ndarray, sample_type: SampleType) -> np.ndarray:
    """
    Shift signed SHORT / INT samples into [0, MAX - MIN] in the unsigned
    container dtype. Other types are returned unchanged.
    """
    info = sample_type_info(sample_type)
    arr = np.asarray(samples)
    if info.unsigned_offset == 0:
        return arr
    return (arr.astype(np.int64) + info.unsigned_offset).astype(info.unsigned_dtype)


def to_signed(samples: np.ndarray, sample_type: SampleType) -> np.ndarray:
    """Inverse of to_unsigned: shift unsigned samples back to [MIN, MAX]."""
    info = sample_type_info(sample_type)
    arr = np.asarray(samples)
    if info.unsigned_offset == 0:
        return arr
    return (arr.astype(np.int64) - info.unsigned_offset).astype(info.dtype)


__all__ = [
    "MinMax",
    "SampleType",
    "SampleTypeInfo",
    "SAMPLE_TYPES",
    "sample_type_info",
    "sample_type_for_dtype",
    "natural_range",
    "wider",
    "to_unsigned",
    "to_signed",
]
