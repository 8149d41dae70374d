# raster_colour/converter_cache.py
from __future__ import annotations

"""
Integral device-space converters and the bounded cache that shares them.

DeviceConverter is expensive enough to build that sessions share one per
(source space, destination space) pair. Its filter() is not re-entrant:
callers hold converter.lock around each call. The cache lock only guards
lookup and insertion, so unrelated converters never serialise each other.
"""

import threading
from collections import OrderedDict
from typing import Callable, Tuple

import numpy as np

from .colour_space import ColourSpace, normalise_components, scale_components
from .constants import CONVERTER_CACHE_MAX_ENTRIES
from .core_types import PixelDescription
from .errors import ConfigurationError
from .sample_types import to_signed, to_unsigned
from .utils import debug_log


class DeviceConverter:
    """Converts integral blocks between two device colour spaces via CIE XYZ."""

    def __init__(self, src_space: ColourSpace, dst_space: ColourSpace) -> None:
        self.src_space = src_space
        self.dst_space = dst_space
        self.lock = threading.Lock()

    def __repr__(self) -> str:
        return f"DeviceConverter({self.src_space.name} -> {self.dst_space.name})"

    def _normalised(self, src_block: np.ndarray, src_desc: PixelDescription) -> np.ndarray:
        n = src_desc.num_components
        unsigned = to_unsigned(src_block[..., :n], src_desc.sample_type)
        return normalise_components(unsigned, src_desc.component_sizes)

    def filter(
        self,
        src_block: np.ndarray,
        src_desc: PixelDescription,
        dst_block: np.ndarray,
        dst_desc: PixelDescription,
    ) -> None:
        """
        Convert src_block (h, w, >=n_src) into dst_block (h, w, >=n_dst) in place.

        Signed samples are shifted to unsigned, normalised by component bit
        size, taken through XYZ, rescaled, rounded and shifted back.
        """
        if src_block.shape[:2] != dst_block.shape[:2]:
            raise ConfigurationError(
                f"block shapes differ: {src_block.shape[:2]} vs {dst_block.shape[:2]}"
            )
        norm = self._normalised(src_block, src_desc)
        if self.src_space is self.dst_space:
            values = norm
        else:
            values = self.dst_space.from_xyz_array(self.src_space.to_xyz_array(norm))
        scaled = scale_components(
            values, dst_desc.component_sizes, dst_desc.info.unsigned_dtype
        )
        dst_block[..., : dst_desc.num_components] = to_signed(
            scaled, dst_desc.sample_type
        )


ConverterFactory = Callable[[ColourSpace, ColourSpace], DeviceConverter]
_Key = Tuple[int, int]
_Entry = Tuple[ColourSpace, ColourSpace, DeviceConverter]


class ConverterCache:
    """
    Bounded LRU of converters keyed on the identity of both colour spaces.

    Entries hold references to their spaces, so an id cannot be recycled
    while its entry is alive. Evicted converters are simply rebuilt on the
    next request.
    """

    def __init__(
        self,
        max_entries: int = CONVERTER_CACHE_MAX_ENTRIES,
        factory: ConverterFactory = DeviceConverter,
        *,
        debug: bool = False,
    ) -> None:
        if max_entries < 1:
            raise ConfigurationError("max_entries must be >= 1")
        self.max_entries = int(max_entries)
        self._factory = factory
        self._entries: "OrderedDict[_Key, _Entry]" = OrderedDict()
        self._lock = threading.Lock()
        self.constructed = 0
        self.debug = debug

    @staticmethod
    def _key(src_space: ColourSpace, dst_space: ColourSpace) -> _Key:
        return (id(src_space), id(dst_space))

    def get(self, src_space: ColourSpace, dst_space: ColourSpace) -> DeviceConverter:
        key = self._key(src_space, dst_space)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self._entries.move_to_end(key)
                return entry[2]
            converter = self._factory(src_space, dst_space)
            self.constructed += 1
            self._entries[key] = (src_space, dst_space, converter)
            if self.debug:
                debug_log(f"converter built: {converter!r}")
            while len(self._entries) > self.max_entries:
                _old_key, (_src, _dst, evicted) = self._entries.popitem(last=False)
                if self.debug:
                    debug_log(f"converter evicted: {evicted!r}")
            return converter

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        with self._lock:
            return self._key(pair[0], pair[1]) in self._entries


DEFAULT_CACHE = ConverterCache()


__all__ = ["DeviceConverter", "ConverterFactory", "ConverterCache", "DEFAULT_CACHE"]
