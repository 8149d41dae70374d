# raster_colour/metadata.py
from __future__ import annotations

"""
Best-effort numeric tag lookup for range discovery.

Exports:
- TagKind, TagValue
- TagLookup (protocol): has_tag(code), get_tag(code) -> TagValue
- MappingTagLookup(mapping): adapter over {code: value}, e.g. Pillow's tag_v2
- read_tag_number(lookup, code, sample_type) -> float | None
- read_range_tags(lookup, sample_type) -> (tag_min, tag_max, no_data)

Notes:
- Nothing here raises on bad data. Absent tags, malformed text, unknown
  value kinds and lookup failures all come back as None.
"""

import enum
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Protocol, Tuple

from .constants import (
    TIFFTAG_GDAL_NODATA,
    TIFFTAG_MAXSAMPLEVALUE,
    TIFFTAG_MINSAMPLEVALUE,
)
from .sample_types import SAMPLE_TYPES, SampleType


class TagKind(enum.Enum):
    TEXT = "text"
    INT_ARRAY = "int_array"
    OTHER = "other"


@dataclass(frozen=True)
class TagValue:
    kind: TagKind
    values: Tuple[Any, ...]


class TagLookup(Protocol):
    def has_tag(self, code: int) -> bool: ...

    def get_tag(self, code: int) -> TagValue: ...


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def classify_tag_value(raw: Any) -> TagValue:
    """Sort a raw tag payload into TEXT, INT_ARRAY or OTHER."""
    if isinstance(raw, bytes):
        return TagValue(TagKind.TEXT, (raw.decode("latin-1"),))
    if isinstance(raw, str):
        return TagValue(TagKind.TEXT, (raw,))
    if _is_int(raw):
        return TagValue(TagKind.INT_ARRAY, (raw,))
    if isinstance(raw, (tuple, list)) and all(_is_int(v) for v in raw):
        return TagValue(TagKind.INT_ARRAY, tuple(raw))
    return TagValue(TagKind.OTHER, (raw,))


class MappingTagLookup:
    """TagLookup over a plain {code: value} mapping."""

    def __init__(self, mapping: Mapping[int, Any]) -> None:
        self._mapping = mapping

    def has_tag(self, code: int) -> bool:
        return code in self._mapping

    def get_tag(self, code: int) -> TagValue:
        return classify_tag_value(self._mapping[code])


# Decoding


def parse_number_text(text: str) -> Optional[float]:
    """Leading float in a tag string (NUL padding and whitespace ignored)."""
    cleaned = text.split("\x00", 1)[0].strip()
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def short_from_code(code: int) -> float:
    """Reinterpret an unsigned 16-bit code as a signed 16-bit value."""
    wrapped = int(code) & 0xFFFF
    if wrapped >= 0x8000:
        wrapped -= 0x10000
    return float(wrapped)


def _narrower(sample_type: SampleType) -> Callable[[float], float]:
    info = SAMPLE_TYPES.get(sample_type)
    return float if info is None else info.narrow


def _decode(tag: TagValue, sample_type: SampleType) -> Optional[float]:
    if not tag.values:
        return None
    first = tag.values[0]
    if tag.kind is TagKind.TEXT:
        parsed = parse_number_text(str(first))
        if parsed is None:
            return None
        return _narrower(sample_type)(parsed)
    if tag.kind is TagKind.INT_ARRAY:
        return _narrower(sample_type)(short_from_code(first))
    return None


def read_tag_number(
    lookup: Optional[TagLookup], code: int, sample_type: SampleType
) -> Optional[float]:
    """
    Decode tag `code` as a number narrowed into sample_type.

    Returns None when the tag is absent or cannot be decoded.
    """
    if lookup is None:
        return None
    try:
        if not lookup.has_tag(code):
            return None
        tag = lookup.get_tag(code)
    except (LookupError, TypeError, ValueError, AttributeError, OSError):
        return None
    if not isinstance(tag, TagValue):
        return None
    return _decode(tag, sample_type)


def read_range_tags(
    lookup: Optional[TagLookup], sample_type: SampleType
) -> Tuple[Optional[float], Optional[float], Optional[float]]:
    """
    (tag_min, tag_max, no_data) for an image of sample_type.

    Min/max sample values are 16-bit fields and decode as SHORT; the no-data
    tag decodes with the image's own type.
    """
    tag_min = read_tag_number(lookup, TIFFTAG_MINSAMPLEVALUE, SampleType.SHORT)
    tag_max = read_tag_number(lookup, TIFFTAG_MAXSAMPLEVALUE, SampleType.SHORT)
    no_data = read_tag_number(lookup, TIFFTAG_GDAL_NODATA, sample_type)
    return tag_min, tag_max, no_data


__all__ = [
    "TagKind",
    "TagValue",
    "TagLookup",
    "classify_tag_value",
    "MappingTagLookup",
    "parse_number_text",
    "short_from_code",
    "read_tag_number",
    "read_range_tags",
]
