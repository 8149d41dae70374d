# raster_colour/colour_bridge.py
from __future__ import annotations

"""
Colour conversion between two pixel descriptions over a rectangular region.

Exports:
- ConversionCase
- classify(src_desc, dst_desc) -> ConversionCase
- bridge_description(src_desc, dst_desc) -> PixelDescription
- ColourConversionSession(src_desc, dst_desc, cache=None, *, debug=False)
    .convert(src, dst, region=None)
- convert(src, src_desc, dst, dst_desc, region=None, cache=None)

Cases (P = perceptual colour space, D = device space):
  1 BOTH_PERCEPTUAL             src -> bridge RGB -> dst, two perceptual legs
  2 SRC_PERCEPTUAL_DST_NON_RGB  src -> bridge RGB, then device leg RGB -> dst
  3 SRC_PERCEPTUAL_DST_RGB      one perceptual leg src -> dst
  4 DST_PERCEPTUAL_SRC_NON_RGB  device leg src -> bridge RGB, then bridge -> dst
  5 DST_PERCEPTUAL_SRC_RGB      one perceptual leg src -> dst
  6 NEITHER_PERCEPTUAL          one device leg src -> dst

Perceptual legs see unsigned samples: SHORT and INT are shifted up before the
leg and back down after it. Device legs with integral data on both sides go
through the cached DeviceConverter on region-aligned blocks under the
converter's lock; with float data on either side they go through CIE XYZ with
samples normalised by the natural range of their type.
"""

import enum
from typing import Optional, Union

import numpy as np

from .colour_space import SRGB, PerceptualColourSpace
from .converter_cache import DEFAULT_CACHE, ConverterCache, DeviceConverter
from .core_types import ColourSpaceKind, PixelDescription, Raster, Rect, as_raster
from .errors import ConfigurationError
from .sample_types import to_signed, to_unsigned, wider
from .utils import print_config_line


class ConversionCase(enum.Enum):
    BOTH_PERCEPTUAL = 1
    SRC_PERCEPTUAL_DST_NON_RGB = 2
    SRC_PERCEPTUAL_DST_RGB = 3
    DST_PERCEPTUAL_SRC_NON_RGB = 4
    DST_PERCEPTUAL_SRC_RGB = 5
    NEITHER_PERCEPTUAL = 6


def classify(src_desc: PixelDescription, dst_desc: PixelDescription) -> ConversionCase:
    src_perceptual = src_desc.colour_space_kind is ColourSpaceKind.PERCEPTUAL
    dst_perceptual = dst_desc.colour_space_kind is ColourSpaceKind.PERCEPTUAL
    if src_perceptual and dst_perceptual:
        return ConversionCase.BOTH_PERCEPTUAL
    if src_perceptual:
        if dst_desc.is_device_rgb:
            return ConversionCase.SRC_PERCEPTUAL_DST_RGB
        return ConversionCase.SRC_PERCEPTUAL_DST_NON_RGB
    if dst_perceptual:
        if src_desc.is_device_rgb:
            return ConversionCase.DST_PERCEPTUAL_SRC_RGB
        return ConversionCase.DST_PERCEPTUAL_SRC_NON_RGB
    return ConversionCase.NEITHER_PERCEPTUAL


def bridge_description(
    src_desc: PixelDescription, dst_desc: PixelDescription
) -> PixelDescription:
    """
    Intermediate device RGB description.

    Takes the side with the wider sample type (the destination on a tie) and
    gives each of the three RGB components that side's widest component size.
    """
    if wider(src_desc.sample_type, dst_desc.sample_type) == dst_desc.sample_type:
        chosen = dst_desc
    else:
        chosen = src_desc
    bits = max(chosen.component_sizes)
    return PixelDescription((bits, bits, bits), chosen.sample_type, SRGB)


# Legs


def _perceptual_space(desc: PixelDescription) -> PerceptualColourSpace:
    space = desc.colour_space
    if not isinstance(space, PerceptualColourSpace):
        raise ConfigurationError(f"{space!r} has no raster-level RGB conversion")
    return space


def _to_rgb_leg(
    src_block: np.ndarray, src_desc: PixelDescription, dst_desc: PixelDescription
) -> np.ndarray:
    """Perceptual src -> device RGB, returned in dst_desc's native dtype."""
    space = _perceptual_space(src_desc)
    unsigned = to_unsigned(src_block[..., : src_desc.num_components], src_desc.sample_type)
    out = space.to_rgb_raster(
        unsigned,
        src_desc.component_sizes,
        dst_desc.component_sizes,
        dst_desc.info.unsigned_dtype,
    )
    return to_signed(out, dst_desc.sample_type)


def _from_rgb_leg(
    src_block: np.ndarray, src_desc: PixelDescription, dst_desc: PixelDescription
) -> np.ndarray:
    """Device RGB src -> perceptual dst, returned in dst_desc's native dtype."""
    space = _perceptual_space(dst_desc)
    unsigned = to_unsigned(src_block[..., : src_desc.num_components], src_desc.sample_type)
    out = space.from_rgb_raster(
        unsigned,
        src_desc.component_sizes,
        dst_desc.component_sizes,
        dst_desc.info.unsigned_dtype,
    )
    return to_signed(out, dst_desc.sample_type)


def _float_device_leg(
    src_block: np.ndarray,
    src_desc: PixelDescription,
    dst_block: np.ndarray,
    dst_desc: PixelDescription,
) -> None:
    """Device -> device through CIE XYZ, normalising integral samples by type range."""
    values = src_block[..., : src_desc.num_components].astype(np.float64)
    if not src_desc.is_float:
        values = (values - src_desc.norm_min) / src_desc.norm_range
    xyz = src_desc.colour_space.to_xyz_array(values)
    out = dst_desc.colour_space.from_xyz_array(xyz)[..., : dst_desc.num_components]
    if not dst_desc.is_float:
        info = dst_desc.info
        out = np.rint(out * dst_desc.norm_range + dst_desc.norm_min)
        out = np.clip(out, info.natural_min, info.natural_max)
    dst_block[..., : dst_desc.num_components] = out.astype(dst_block.dtype)


def _device_leg(
    src: Raster,
    src_desc: PixelDescription,
    dst: Raster,
    dst_desc: PixelDescription,
    region: Rect,
    converter: Optional[DeviceConverter],
) -> None:
    src_block = src.window(region)
    dst_block = dst.window(region)
    if converter is None:
        _float_device_leg(src_block, src_desc, dst_block, dst_desc)
        return
    with converter.lock:
        converter.filter(src_block, src_desc, dst_block, dst_desc)


# Session


class ColourConversionSession:
    """
    One source/destination description pair.

    The case, bridge description and device converter are resolved once
    here and reused by every convert() call, which may run concurrently for
    disjoint destination regions.
    """

    def __init__(
        self,
        src_desc: PixelDescription,
        dst_desc: PixelDescription,
        cache: Optional[ConverterCache] = None,
        *,
        debug: bool = False,
    ) -> None:
        self.src_desc = src_desc
        self.dst_desc = dst_desc
        self.cache = cache if cache is not None else DEFAULT_CACHE
        self.case = classify(src_desc, dst_desc)
        self.bridge: Optional[PixelDescription] = None
        self.converter: Optional[DeviceConverter] = None

        case = self.case
        if case in (
            ConversionCase.BOTH_PERCEPTUAL,
            ConversionCase.SRC_PERCEPTUAL_DST_NON_RGB,
            ConversionCase.DST_PERCEPTUAL_SRC_NON_RGB,
        ):
            self.bridge = bridge_description(src_desc, dst_desc)
        if case is ConversionCase.SRC_PERCEPTUAL_DST_NON_RGB:
            self.converter = self._device_converter(self.bridge, dst_desc)
        elif case is ConversionCase.DST_PERCEPTUAL_SRC_NON_RGB:
            self.converter = self._device_converter(src_desc, self.bridge)
        elif case is ConversionCase.NEITHER_PERCEPTUAL:
            self.converter = self._device_converter(src_desc, dst_desc)

        if debug:
            print_config_line(
                "convert",
                [
                    ("Case", case.name),
                    ("Src", f"{src_desc.colour_space.name}/{src_desc.sample_type.name}"),
                    ("Dst", f"{dst_desc.colour_space.name}/{dst_desc.sample_type.name}"),
                    ("Bridge", "-" if self.bridge is None else self.bridge.sample_type.name),
                    ("Path", "integral" if self.converter is not None else "float/perceptual"),
                ],
                debug=True,
            )

    def _device_converter(
        self, src_desc: PixelDescription, dst_desc: PixelDescription
    ) -> Optional[DeviceConverter]:
        if src_desc.is_float or dst_desc.is_float:
            return None
        return self.cache.get(src_desc.colour_space, dst_desc.colour_space)

    def convert(
        self,
        src: Union[Raster, np.ndarray],
        dst: Union[Raster, np.ndarray],
        region: Optional[Rect] = None,
    ) -> None:
        """Convert src into dst over region (dst's bounds when omitted), in place."""
        src_r = as_raster(src)
        dst_r = as_raster(dst)
        if region is None:
            region = dst_r.bounds
        if region.area == 0:
            return
        s = src_r.child(region)
        d = dst_r.child(region)
        src_desc, dst_desc, bridge = self.src_desc, self.dst_desc, self.bridge
        n_dst = dst_desc.num_components
        case = self.case

        if case is ConversionCase.BOTH_PERCEPTUAL:
            rgb = _to_rgb_leg(s.data, src_desc, bridge)
            d.data[..., :n_dst] = _from_rgb_leg(rgb, bridge, dst_desc)
        elif case is ConversionCase.SRC_PERCEPTUAL_DST_NON_RGB:
            rgb = Raster(_to_rgb_leg(s.data, src_desc, bridge), region.x, region.y)
            _device_leg(rgb, bridge, d, dst_desc, region, self.converter)
        elif case is ConversionCase.SRC_PERCEPTUAL_DST_RGB:
            d.data[..., :n_dst] = _to_rgb_leg(s.data, src_desc, dst_desc)
        elif case is ConversionCase.DST_PERCEPTUAL_SRC_NON_RGB:
            rgb = Raster.zeros(
                region.width, region.height, 3, bridge.sample_type, region.x, region.y
            )
            _device_leg(s, src_desc, rgb, bridge, region, self.converter)
            d.data[..., :n_dst] = _from_rgb_leg(rgb.data, bridge, dst_desc)
        elif case is ConversionCase.DST_PERCEPTUAL_SRC_RGB:
            d.data[..., :n_dst] = _from_rgb_leg(s.data, src_desc, dst_desc)
        else:
            _device_leg(s, src_desc, d, dst_desc, region, self.converter)


def convert(
    src: Union[Raster, np.ndarray],
    src_desc: PixelDescription,
    dst: Union[Raster, np.ndarray],
    dst_desc: PixelDescription,
    region: Optional[Rect] = None,
    cache: Optional[ConverterCache] = None,
) -> None:
    """One-shot ColourConversionSession(src_desc, dst_desc, cache).convert(...)."""
    ColourConversionSession(src_desc, dst_desc, cache).convert(src, dst, region)


__all__ = [
    "ConversionCase",
    "classify",
    "bridge_description",
    "ColourConversionSession",
    "convert",
]
